from __future__ import annotations

from threading import Lock

from subway_scribe.application.errors import ExternalServiceError
from subway_scribe.application.port.text_to_speech import AudioOutput, TextToSpeech
from subway_scribe.application.recording_session_manager import RecordingSessionManager
from subway_scribe.application.transcription_submitter import TranscriptionSubmitter
from subway_scribe.domain.vo.recording_session import RecordingSession, RecordingState
from subway_scribe.domain.vo.transcription import TranscriptionResult
from subway_scribe.utils.logger import Logger


class ListeningController:
    """Record → transcribe → speak flow behind the main window.

    The window only calls these methods and renders what they return, so the
    whole flow can be driven without Qt.
    """

    def __init__(
        self,
        recorder: RecordingSessionManager,
        submitter: TranscriptionSubmitter,
        logger: Logger,
        tts: TextToSpeech | None = None,
        audio_output: AudioOutput | None = None,
    ) -> None:
        self.recorder = recorder
        self.submitter = submitter
        self.logger = logger
        self.tts = tts
        self.audio_output = audio_output

        self._state_lock = Lock()
        self._result: TranscriptionResult | None = None
        self._result_handle: str | None = None
        self._submitting = False

    @property
    def session(self) -> RecordingSession:
        return self.recorder.session

    @property
    def result(self) -> TranscriptionResult | None:
        with self._state_lock:
            return self._result

    @property
    def is_transcribing(self) -> bool:
        with self._state_lock:
            return self._submitting

    @property
    def can_speak(self) -> bool:
        result = self.result
        return (
            self.tts is not None
            and self.audio_output is not None
            and result is not None
            and result.ok
            and bool(result.text)
        )

    def toggle(self) -> RecordingSession:
        if self.recorder.session.is_recording:
            self._log("Stopping recording...")
            return self.recorder.stop_session()

        if self.is_transcribing:
            self._log("Transcription in progress; wait for it to finish.")
            return self.recorder.session

        self._log("Starting recording...")
        with self._state_lock:
            self._result = None
            self._result_handle = None
        return self.recorder.start_session()

    def needs_transcription(self) -> bool:
        session = self.recorder.session
        if session.state is not RecordingState.COMPLETED or not session.audio_handle:
            return False
        with self._state_lock:
            return not self._submitting and self._result_handle != session.audio_handle

    def transcribe(self) -> TranscriptionResult | None:
        """Submit the completed session once; later calls return the same result.

        Blocks until the submission finishes. Returns None when there is no
        completed recording, or when the recording was reset or replaced
        before the result came back.
        """
        session = self.recorder.session
        handle = session.audio_handle
        if session.state is not RecordingState.COMPLETED or not handle:
            return None

        with self._state_lock:
            if self._result_handle == handle and self._result is not None:
                return self._result
            if self._submitting:
                return None
            self._submitting = True

        self._log("Starting transcription...")
        try:
            result = self.submitter.submit(handle)
        finally:
            with self._state_lock:
                self._submitting = False

        if self.recorder.session.audio_handle != handle:
            # Reset or re-recorded while the request was in flight.
            self._log("Discarding transcription for a recording that is gone.")
            return None

        with self._state_lock:
            self._result = result
            self._result_handle = handle

        if result.ok:
            self._log(f"Transcription: {result.text}")
        else:
            self._log(f"Transcription failed: {result.message}")
        return result

    def speak(self) -> bool:
        """Read the transcript aloud. Returns False when nothing was played."""
        tts = self.tts
        audio_output = self.audio_output
        result = self.result
        if tts is None or audio_output is None:
            return False
        if result is None or not result.ok or not result.text:
            return False

        try:
            audio = tts.synthesize(result.text)
            audio_output.play(audio, sample_rate=tts.sample_rate)
        except ExternalServiceError as e:
            self._log(f"[TTS] {e}")
            return False
        except (OSError, RuntimeError, ValueError) as e:
            self._log(f"[TTS] Playback failed: {e}")
            return False
        return True

    def play_recording(self) -> str | None:
        error = self.recorder.play_recording()
        if error:
            self._log(error)
        return error

    def stop_playing(self) -> None:
        self.recorder.stop_playing()

    def reset(self) -> None:
        self.recorder.reset()
        if self.audio_output is not None:
            try:
                self.audio_output.stop()
            except (OSError, RuntimeError, ValueError) as e:
                self._log(f"[TTS] Failed to stop playback: {e}")
        with self._state_lock:
            self._result = None
            self._result_handle = None

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)
