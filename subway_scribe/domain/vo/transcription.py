from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class AudioEncoding(str, Enum):
    LINEAR16 = "LINEAR16"
    FLAC = "FLAC"
    MP3 = "MP3"


@dataclass(frozen=True)
class EncodingHypothesis:
    encoding: AudioEncoding
    sample_rate_hertz: int = 16_000

    @property
    def description(self) -> str:
        return f"{self.encoding.value}@{self.sample_rate_hertz}Hz"


# Tried in this order; the first usable transcript wins.
ENCODING_HYPOTHESES: tuple[EncodingHypothesis, ...] = (
    EncodingHypothesis(AudioEncoding.LINEAR16),
    EncodingHypothesis(AudioEncoding.FLAC),
    EncodingHypothesis(AudioEncoding.MP3),
)


class AttemptOutcome(str, Enum):
    SUCCESS = "success"
    NO_TRANSCRIPT = "no_transcript"
    TRANSPORT_ERROR = "transport_error"
    INVALID_CREDENTIALS = "invalid_credentials"


@dataclass(frozen=True)
class TranscriptionAttempt:
    hypothesis: EncodingHypothesis
    outcome: AttemptOutcome
    detail: str | None = None


class TranscriptionErrorKind(str, Enum):
    MISSING_CREDENTIALS = "missing_credentials"
    AUDIO_READ_ERROR = "audio_read_error"
    NO_TRANSCRIPT_FOUND = "no_transcript_found"


TRANSCRIPTION_ERROR_MESSAGES: dict[TranscriptionErrorKind, str] = {
    TranscriptionErrorKind.MISSING_CREDENTIALS: (
        "Google API key missing. Set GOOGLE_API_KEY in your .env file."
    ),
    TranscriptionErrorKind.AUDIO_READ_ERROR: "Failed to read audio file.",
    TranscriptionErrorKind.NO_TRANSCRIPT_FOUND: (
        "No transcription found. Try recording longer audio with clear speech."
    ),
}


@dataclass(frozen=True)
class TranscriptionResult:
    text: str | None = None
    error: TranscriptionErrorKind | None = None
    message: str | None = None
    attempts: tuple[TranscriptionAttempt, ...] = ()
    mocked: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def display_text(self) -> str:
        if self.ok:
            return self.text or ""
        return f"({self.message})"

    @staticmethod
    def success(
        text: str,
        *,
        attempts: tuple[TranscriptionAttempt, ...] = (),
        mocked: bool = False,
    ) -> "TranscriptionResult":
        return TranscriptionResult(text=text, attempts=attempts, mocked=mocked)

    @staticmethod
    def failure(
        kind: TranscriptionErrorKind,
        *,
        attempts: tuple[TranscriptionAttempt, ...] = (),
    ) -> "TranscriptionResult":
        return TranscriptionResult(
            error=kind,
            message=TRANSCRIPTION_ERROR_MESSAGES[kind],
            attempts=attempts,
        )
