from __future__ import annotations


class ExternalServiceError(RuntimeError):
    """Raised when an external service call fails (provider-agnostic)."""


class SpeechTransportError(ExternalServiceError):
    """Raised when a speech recognition request fails."""


class InvalidCredentialsError(SpeechTransportError):
    """Raised when the recognition service rejects the API key."""


class TextToSpeechError(ExternalServiceError):
    """Raised when text-to-speech synthesis fails."""


class AudioDeviceError(RuntimeError):
    """Raised by the audio platform when a device or stream operation fails."""


class RecordingStateError(RuntimeError):
    """Raised when a recording operation is called in the wrong state."""
