from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

DEFAULT_SPEECH_ENDPOINT = "https://speech.googleapis.com/v1/speech:recognize"
DEFAULT_MOCK_DELAY_SECONDS = 2.0
DEFAULT_SAMPLE_RATE = 16_000


@dataclass(frozen=True)
class SpeechConfig:
    api_key: str | None = None
    endpoint: str = DEFAULT_SPEECH_ENDPOINT
    language_code: str = "en-US"
    model: str = "latest_long"
    mock_delay_seconds: float = DEFAULT_MOCK_DELAY_SECONDS
    timeout_seconds: float | None = None


@dataclass(frozen=True)
class RecorderConfig:
    sample_rate: int = DEFAULT_SAMPLE_RATE
    channels: int = 1
    recordings_dir: Path | None = None


@dataclass(frozen=True)
class OpenAIConfig:
    api_key: str
    base_url: str | None = None
    tts_model: str = "gpt-4o-mini-tts"
    tts_voice: str = "alloy"


@dataclass(frozen=True)
class AppConfig:
    speech: SpeechConfig
    recorder: RecorderConfig
    openai: OpenAIConfig | None = None

    @staticmethod
    def from_env() -> "AppConfig":
        # A missing Google key is not a config error; submissions report it.
        speech = SpeechConfig(
            api_key=os.getenv("GOOGLE_API_KEY") or None,
            endpoint=os.getenv("GOOGLE_SPEECH_ENDPOINT") or DEFAULT_SPEECH_ENDPOINT,
            mock_delay_seconds=_read_float(
                "SUBWAY_SCRIBE_MOCK_DELAY_SECONDS", DEFAULT_MOCK_DELAY_SECONDS
            ),
            timeout_seconds=_read_float("GOOGLE_SPEECH_TIMEOUT_SECONDS", None),
        )

        sample_rate_raw = os.getenv("SUBWAY_SCRIBE_SAMPLE_RATE")
        sample_rate = DEFAULT_SAMPLE_RATE
        if sample_rate_raw:
            try:
                sample_rate = int(sample_rate_raw)
            except ValueError as exc:
                raise ValueError(
                    "SUBWAY_SCRIBE_SAMPLE_RATE must be an integer (Hz)."
                ) from exc

        recordings_dir_raw = os.getenv("SUBWAY_SCRIBE_RECORDINGS_DIR")
        recorder = RecorderConfig(
            sample_rate=sample_rate,
            recordings_dir=Path(recordings_dir_raw) if recordings_dir_raw else None,
        )

        openai_config = None
        openai_key = os.getenv("OPENAI_API_KEY")
        if openai_key:
            openai_config = OpenAIConfig(
                api_key=openai_key,
                base_url=os.getenv("OPENAI_BASE_URL") or None,
                tts_model=os.getenv("OPENAI_TTS_MODEL") or "gpt-4o-mini-tts",
                tts_voice=os.getenv("OPENAI_TTS_VOICE") or "alloy",
            )

        return AppConfig(speech=speech, recorder=recorder, openai=openai_config)


def _read_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number (seconds).") from exc
