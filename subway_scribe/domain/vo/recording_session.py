from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class RecordingState(str, Enum):
    IDLE = "idle"
    REQUESTING_PERMISSION = "requesting_permission"
    RECORDING = "recording"
    STOPPING = "stopping"
    COMPLETED = "completed"
    FAILED = "failed"


class RecordingErrorKind(str, Enum):
    PERMISSION_DENIED = "permission_denied"
    DEVICE_UNAVAILABLE = "device_unavailable"
    NO_ACTIVE_RECORDING = "no_active_recording"
    FINALIZE_ERROR = "finalize_error"
    PLAYBACK_ERROR = "playback_error"


RECORDING_ERROR_MESSAGES: dict[RecordingErrorKind, str] = {
    RecordingErrorKind.PERMISSION_DENIED: "Microphone permission is needed to record audio.",
    RecordingErrorKind.DEVICE_UNAVAILABLE: "Failed to start recording.",
    RecordingErrorKind.NO_ACTIVE_RECORDING: "No active recording to stop.",
    RecordingErrorKind.FINALIZE_ERROR: "Failed to stop recording.",
    RecordingErrorKind.PLAYBACK_ERROR: "Failed to play recording.",
}


@dataclass(frozen=True)
class RecordingSession:
    """Snapshot of the current capture.

    A ``COMPLETED`` session always carries an audio handle; a ``FAILED`` one
    always carries an error kind and never a handle.
    """

    state: RecordingState = RecordingState.IDLE
    audio_handle: str | None = None
    error_kind: RecordingErrorKind | None = None
    error_message: str | None = None

    @property
    def is_recording(self) -> bool:
        return self.state is RecordingState.RECORDING

    @property
    def is_terminal(self) -> bool:
        return self.state in (RecordingState.COMPLETED, RecordingState.FAILED)

    @staticmethod
    def failed(kind: RecordingErrorKind) -> "RecordingSession":
        return RecordingSession(
            state=RecordingState.FAILED,
            error_kind=kind,
            error_message=RECORDING_ERROR_MESSAGES[kind],
        )

    @staticmethod
    def completed(audio_handle: str) -> "RecordingSession":
        return RecordingSession(state=RecordingState.COMPLETED, audio_handle=audio_handle)
