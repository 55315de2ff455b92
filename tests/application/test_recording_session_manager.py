"""Unit tests for RecordingSessionManager."""
from __future__ import annotations

import unittest
from unittest.mock import MagicMock, call

from subway_scribe.application.errors import AudioDeviceError, RecordingStateError
from subway_scribe.application.recording_session_manager import RecordingSessionManager
from subway_scribe.domain.vo.recording_session import RecordingErrorKind, RecordingState
from subway_scribe.utils.logger import Logger


class TestRecordingSessionManager(unittest.TestCase):
    """Test cases for RecordingSessionManager."""

    def setUp(self):
        """Set up a platform that grants permission and records successfully."""
        self.stream = MagicMock(name="stream")
        self.platform = MagicMock(name="platform")
        self.platform.request_permission.return_value = True
        self.platform.open_stream.return_value = self.stream
        self.platform.close_stream.return_value = "/tmp/recording-1.wav"
        self.logger = Logger()
        self.manager = RecordingSessionManager(platform=self.platform, logger=self.logger)

    def test_initial_state_is_idle(self):
        session = self.manager.session
        self.assertIs(session.state, RecordingState.IDLE)
        self.assertIsNone(session.audio_handle)

    def test_start_then_stop_completes_with_handle(self):
        """Test the happy path yields a completed session with an audio handle."""
        started = self.manager.start_session()
        self.assertIs(started.state, RecordingState.RECORDING)

        stopped = self.manager.stop_session()

        self.assertIs(stopped.state, RecordingState.COMPLETED)
        self.assertEqual(stopped.audio_handle, "/tmp/recording-1.wav")
        self.assertIsNone(stopped.error_kind)
        self.assertEqual(self.manager.session, stopped)

    def test_recording_mode_is_set_then_restored(self):
        self.manager.start_session()
        self.manager.stop_session()

        self.assertEqual(
            self.platform.set_recording_mode.call_args_list,
            [call(True), call(False)],
        )

    def test_stream_released_after_stop(self):
        self.manager.start_session()
        self.manager.stop_session()

        self.platform.close_stream.assert_called_once_with(self.stream)
        self.stream.release.assert_called_once()

    def test_permission_denied(self):
        """Test a denied permission fails without touching the device."""
        self.platform.request_permission.return_value = False

        session = self.manager.start_session()

        self.assertIs(session.state, RecordingState.FAILED)
        self.assertIs(session.error_kind, RecordingErrorKind.PERMISSION_DENIED)
        self.assertEqual(
            session.error_message, "Microphone permission is needed to record audio."
        )
        self.platform.open_stream.assert_not_called()
        self.platform.set_recording_mode.assert_not_called()

    def test_device_unavailable_when_stream_fails_to_open(self):
        self.platform.open_stream.side_effect = AudioDeviceError("no input device")

        session = self.manager.start_session()

        self.assertIs(session.state, RecordingState.FAILED)
        self.assertIs(session.error_kind, RecordingErrorKind.DEVICE_UNAVAILABLE)
        self.assertIsNone(session.audio_handle)
        # Interaction mode is put back after a failed open.
        self.platform.set_recording_mode.assert_called_with(False)

    def test_device_unavailable_when_mode_cannot_be_set(self):
        self.platform.set_recording_mode.side_effect = [OSError("busy"), None]

        session = self.manager.start_session()

        self.assertIs(session.error_kind, RecordingErrorKind.DEVICE_UNAVAILABLE)
        self.platform.open_stream.assert_not_called()

    def test_stop_without_recording(self):
        """Test stopping while idle reports that nothing is being recorded."""
        session = self.manager.stop_session()

        self.assertIs(session.state, RecordingState.FAILED)
        self.assertIs(session.error_kind, RecordingErrorKind.NO_ACTIVE_RECORDING)
        self.platform.close_stream.assert_not_called()

    def test_stop_twice_reports_no_active_recording(self):
        self.manager.start_session()
        self.manager.stop_session()

        session = self.manager.stop_session()

        self.assertIs(session.error_kind, RecordingErrorKind.NO_ACTIVE_RECORDING)
        self.assertIsNone(session.audio_handle)

    def test_finalize_error_still_releases_stream(self):
        """Test a failing finalize leaves no handle and still frees the stream."""
        self.platform.close_stream.side_effect = AudioDeviceError("disk full")
        self.manager.start_session()

        session = self.manager.stop_session()

        self.assertIs(session.state, RecordingState.FAILED)
        self.assertIs(session.error_kind, RecordingErrorKind.FINALIZE_ERROR)
        self.assertIsNone(session.audio_handle)
        self.stream.release.assert_called_once()
        self.platform.set_recording_mode.assert_called_with(False)

    def test_empty_handle_is_finalize_error(self):
        self.platform.close_stream.return_value = ""
        self.manager.start_session()

        session = self.manager.stop_session()

        self.assertIs(session.error_kind, RecordingErrorKind.FINALIZE_ERROR)

    def test_start_while_recording_raises(self):
        self.manager.start_session()

        with self.assertRaises(RecordingStateError):
            self.manager.start_session()

        self.assertIs(self.manager.session.state, RecordingState.RECORDING)

    def test_start_after_completed_clears_previous_handle(self):
        self.manager.start_session()
        self.manager.stop_session()

        session = self.manager.start_session()

        self.assertIs(session.state, RecordingState.RECORDING)
        self.assertIsNone(session.audio_handle)

    def test_start_after_failure_is_allowed(self):
        self.platform.request_permission.side_effect = [False, True]
        self.manager.start_session()

        session = self.manager.start_session()

        self.assertIs(session.state, RecordingState.RECORDING)
        self.assertIsNone(session.error_kind)

    def test_reset_from_every_state_returns_idle(self):
        """Test reset from idle, recording, completed and failed sessions."""
        self.manager.reset()
        self.assertIs(self.manager.session.state, RecordingState.IDLE)

        self.manager.start_session()
        self.manager.reset()
        self.assertIs(self.manager.session.state, RecordingState.IDLE)
        self.stream.release.assert_called_once()

        self.manager.start_session()
        self.manager.stop_session()
        self.manager.reset()
        self.assertIs(self.manager.session.state, RecordingState.IDLE)
        self.assertIsNone(self.manager.session.audio_handle)

        self.manager.stop_session()
        self.assertIs(self.manager.session.state, RecordingState.FAILED)
        self.manager.reset()
        self.assertIs(self.manager.session.state, RecordingState.IDLE)
        self.assertIsNone(self.manager.session.error_kind)

    def test_reset_is_idempotent(self):
        self.manager.start_session()
        self.manager.stop_session()

        first = self.manager.reset()
        second = self.manager.reset()

        self.assertEqual(first, second)
        self.assertIs(second.state, RecordingState.IDLE)
        self.assertIsNone(second.audio_handle)

    def test_play_recording_uses_completed_handle(self):
        self.manager.start_session()
        self.manager.stop_session()

        error = self.manager.play_recording()

        self.assertIsNone(error)
        self.platform.play.assert_called_once_with("/tmp/recording-1.wav")

    def test_play_recording_without_handle(self):
        error = self.manager.play_recording()

        self.assertEqual(error, "No recording to play.")
        self.platform.play.assert_not_called()

    def test_play_recording_failure_keeps_session(self):
        self.platform.play.side_effect = AudioDeviceError("no output device")
        self.manager.start_session()
        completed = self.manager.stop_session()

        error = self.manager.play_recording()

        self.assertEqual(error, "Failed to play recording.")
        self.assertEqual(self.manager.session, completed)

    def test_reset_stops_playback(self):
        playback = MagicMock(name="playback")
        self.platform.play.return_value = playback
        self.manager.start_session()
        self.manager.stop_session()
        self.manager.play_recording()

        self.manager.reset()
        self.manager.reset()

        playback.stop.assert_called_once()

    def test_stop_playing(self):
        playback = MagicMock(name="playback")
        self.platform.play.return_value = playback
        self.manager.start_session()
        self.manager.stop_session()
        self.manager.play_recording()

        self.manager.stop_playing()

        playback.stop.assert_called_once()

    def test_state_is_requesting_permission_while_asking(self):
        """Test the session reads REQUESTING_PERMISSION during the permission prompt."""
        seen = []

        def ask():
            seen.append(self.manager.session.state)
            return True

        self.platform.request_permission.side_effect = ask

        self.manager.start_session()

        self.assertEqual(seen, [RecordingState.REQUESTING_PERMISSION])

    def test_state_is_stopping_while_finalizing(self):
        seen = []

        def finalize(stream):
            seen.append(self.manager.session.state)
            return "/tmp/recording-1.wav"

        self.platform.close_stream.side_effect = finalize
        self.manager.start_session()

        self.manager.stop_session()

        self.assertEqual(seen, [RecordingState.STOPPING])

    def test_release_failure_after_finalize_keeps_recording(self):
        """Test a failing release neither raises nor skips restoring the mode."""
        self.stream.release.side_effect = AudioDeviceError("close failed")
        self.manager.start_session()

        session = self.manager.stop_session()

        self.assertIs(session.state, RecordingState.COMPLETED)
        self.assertEqual(session.audio_handle, "/tmp/recording-1.wav")
        self.assertEqual(
            self.platform.set_recording_mode.call_args_list,
            [call(True), call(False)],
        )
        self.assertIn("[REC] Failed to release capture stream: close failed", self.logger.lines)

    def test_release_failure_with_finalize_error_fails(self):
        self.platform.close_stream.side_effect = AudioDeviceError("disk full")
        self.stream.release.side_effect = AudioDeviceError("close failed")
        self.manager.start_session()

        session = self.manager.stop_session()

        self.assertIs(session.state, RecordingState.FAILED)
        self.assertIs(session.error_kind, RecordingErrorKind.FINALIZE_ERROR)
        self.platform.set_recording_mode.assert_called_with(False)

    def test_reset_survives_release_failure(self):
        self.manager.start_session()
        self.platform.set_recording_mode.reset_mock()
        self.stream.release.side_effect = AudioDeviceError("close failed")

        session = self.manager.reset()

        self.assertIs(session.state, RecordingState.IDLE)
        self.assertIs(self.manager.session.state, RecordingState.IDLE)
        self.platform.set_recording_mode.assert_called_once_with(False)

    def test_mode_change_failure_during_start_is_device_unavailable(self):
        self.platform.set_recording_mode.side_effect = [
            AudioDeviceError("could not stop playback"),
            None,
        ]

        session = self.manager.start_session()

        self.assertIs(session.state, RecordingState.FAILED)
        self.assertIs(session.error_kind, RecordingErrorKind.DEVICE_UNAVAILABLE)

    def test_failures_are_logged(self):
        self.platform.request_permission.return_value = False

        self.manager.start_session()

        self.assertIn(
            "[REC] Microphone permission is needed to record audio.", self.logger.lines
        )


if __name__ == "__main__":
    unittest.main()
