from __future__ import annotations

from threading import Lock

from subway_scribe.application.errors import AudioDeviceError, RecordingStateError
from subway_scribe.application.port.audio_platform import (
    AudioPlatform,
    CaptureStream,
    Playback,
)
from subway_scribe.domain.vo.recording_session import (
    RECORDING_ERROR_MESSAGES,
    RecordingErrorKind,
    RecordingSession,
    RecordingState,
)
from subway_scribe.utils.logger import Logger

_DEVICE_ERRORS = (AudioDeviceError, OSError, RuntimeError, ValueError)


class RecordingSessionManager:
    """Owns the lifecycle of a single microphone capture."""

    def __init__(self, platform: AudioPlatform, logger: Logger | None = None) -> None:
        self.platform = platform
        self.logger = logger

        self._lock = Lock()
        self._session = RecordingSession()
        self._stream: CaptureStream | None = None
        self._playback: Playback | None = None

    @property
    def session(self) -> RecordingSession:
        with self._lock:
            return self._session

    def start_session(self) -> RecordingSession:
        with self._lock:
            if self._session.state is RecordingState.RECORDING:
                raise RecordingStateError("A recording is already in progress.")

        self.reset()
        self._set(RecordingSession(state=RecordingState.REQUESTING_PERMISSION))

        try:
            granted = self.platform.request_permission()
        except _DEVICE_ERRORS as e:
            self._log(f"[REC] Permission request failed: {e}")
            granted = False
        if not granted:
            return self._fail(RecordingErrorKind.PERMISSION_DENIED)

        try:
            self.platform.set_recording_mode(True)
            stream = self.platform.open_stream()
        except _DEVICE_ERRORS as e:
            self._log(f"[REC] Failed to open capture stream: {e}")
            self._restore_mode()
            return self._fail(RecordingErrorKind.DEVICE_UNAVAILABLE)

        with self._lock:
            self._stream = stream
        self._log("[REC] Recording started.")
        return self._set(RecordingSession(state=RecordingState.RECORDING))

    def stop_session(self) -> RecordingSession:
        with self._lock:
            stream = self._stream
            self._stream = None
            recording = self._session.state is RecordingState.RECORDING

        if stream is None or not recording:
            return self._fail(RecordingErrorKind.NO_ACTIVE_RECORDING)

        self._set(RecordingSession(state=RecordingState.STOPPING))
        try:
            handle = self.platform.close_stream(stream)
        except _DEVICE_ERRORS as e:
            self._log(f"[REC] Failed to finalize recording: {e}")
            handle = None
        finally:
            self._release_stream(stream)

        if not handle:
            return self._fail(RecordingErrorKind.FINALIZE_ERROR)

        self._log(f"[REC] Recording saved: {handle}")
        return self._set(RecordingSession.completed(handle))

    def reset(self) -> RecordingSession:
        with self._lock:
            stream = self._stream
            playback = self._playback
            self._stream = None
            self._playback = None
            self._session = RecordingSession()

        if stream is not None:
            self._release_stream(stream)
        if playback is not None:
            self._stop_playback(playback)
        return RecordingSession()

    def play_recording(self) -> str | None:
        """Replay the completed artifact. Returns an error message on failure."""
        with self._lock:
            handle = self._session.audio_handle
            previous = self._playback
            self._playback = None

        if previous is not None:
            self._stop_playback(previous)

        if not handle:
            return "No recording to play."

        try:
            playback = self.platform.play(handle)
        except _DEVICE_ERRORS as e:
            self._log(f"[REC] Playback failed: {e}")
            return RECORDING_ERROR_MESSAGES[RecordingErrorKind.PLAYBACK_ERROR]

        with self._lock:
            self._playback = playback
        return None

    def stop_playing(self) -> None:
        with self._lock:
            playback = self._playback
            self._playback = None
        if playback is not None:
            self._stop_playback(playback)

    def _stop_playback(self, playback: Playback) -> None:
        try:
            playback.stop()
        except _DEVICE_ERRORS as e:
            self._log(f"[REC] Failed to stop playback: {e}")

    def _release_stream(self, stream: CaptureStream) -> None:
        try:
            stream.release()
        except _DEVICE_ERRORS as e:
            self._log(f"[REC] Failed to release capture stream: {e}")
        finally:
            self._restore_mode()

    def _restore_mode(self) -> None:
        try:
            self.platform.set_recording_mode(False)
        except _DEVICE_ERRORS as e:
            self._log(f"[REC] Failed to restore audio mode: {e}")

    def _fail(self, kind: RecordingErrorKind) -> RecordingSession:
        session = RecordingSession.failed(kind)
        self._log(f"[REC] {session.error_message}")
        return self._set(session)

    def _set(self, session: RecordingSession) -> RecordingSession:
        with self._lock:
            self._session = session
        return session

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)
