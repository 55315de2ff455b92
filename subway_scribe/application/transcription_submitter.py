from __future__ import annotations

import base64
import random
import time
from collections.abc import Callable, Sequence
from typing import Any

from subway_scribe.application.errors import (
    AudioDeviceError,
    InvalidCredentialsError,
    SpeechTransportError,
)
from subway_scribe.application.mock_transcripts import pick_mock_transcript
from subway_scribe.application.port.audio_platform import AudioPlatform
from subway_scribe.application.port.speech_transport import SpeechTransport
from subway_scribe.config import SpeechConfig
from subway_scribe.domain.vo.transcription import (
    ENCODING_HYPOTHESES,
    AttemptOutcome,
    EncodingHypothesis,
    TranscriptionAttempt,
    TranscriptionErrorKind,
    TranscriptionResult,
)
from subway_scribe.utils.logger import Logger

GOOGLE_API_KEY_PREFIX = "AIza"


class TranscriptionSubmitter:
    """Sends a finished recording to the recognition service.

    The audio encoding is not known up front, so each hypothesis in
    ``hypotheses`` is tried in order until one produces a transcript. When
    the API key is malformed or rejected, a canned subway announcement is
    returned after ``config.mock_delay_seconds`` instead of an error.
    """

    def __init__(
        self,
        *,
        config: SpeechConfig,
        transport: SpeechTransport,
        platform: AudioPlatform,
        rng: random.Random | None = None,
        sleep: Callable[[float], None] = time.sleep,
        hypotheses: Sequence[EncodingHypothesis] = ENCODING_HYPOTHESES,
        logger: Logger | None = None,
    ) -> None:
        self.config = config
        self.transport = transport
        self.platform = platform
        self.rng = rng or random.Random()
        self.sleep = sleep
        self.hypotheses = tuple(hypotheses)
        self.logger = logger

    def submit(self, audio_handle: str) -> TranscriptionResult:
        api_key = self.config.api_key
        if not api_key:
            self._log("[STT] Google API key is missing.")
            return TranscriptionResult.failure(TranscriptionErrorKind.MISSING_CREDENTIALS)

        if not api_key.startswith(GOOGLE_API_KEY_PREFIX):
            self._log("[STT] API key format looks invalid, using mock transcription.")
            return self._mock_result(())

        try:
            content = self._encode_audio(audio_handle)
        except (AudioDeviceError, OSError, ValueError) as e:
            self._log(f"[STT] Failed to read audio file: {e}")
            return TranscriptionResult.failure(TranscriptionErrorKind.AUDIO_READ_ERROR)

        attempts: list[TranscriptionAttempt] = []
        for hypothesis in self.hypotheses:
            self._log(f"[STT] Trying {hypothesis.description} encoding...")
            try:
                response = self.transport.recognize(
                    self.build_request(content, hypothesis), api_key=api_key
                )
            except InvalidCredentialsError as e:
                attempts.append(
                    TranscriptionAttempt(hypothesis, AttemptOutcome.INVALID_CREDENTIALS, str(e))
                )
                self._log("[STT] API key was rejected, using mock transcription.")
                return self._mock_result(tuple(attempts))
            except SpeechTransportError as e:
                attempts.append(
                    TranscriptionAttempt(hypothesis, AttemptOutcome.TRANSPORT_ERROR, str(e))
                )
                self._log(f"[STT] {hypothesis.description} request failed: {e}")
                continue

            transcript = extract_transcript(response)
            if not transcript:
                attempts.append(TranscriptionAttempt(hypothesis, AttemptOutcome.NO_TRANSCRIPT))
                self._log(f"[STT] No transcript for {hypothesis.description}.")
                continue

            attempts.append(TranscriptionAttempt(hypothesis, AttemptOutcome.SUCCESS))
            self._log(f"[STT] Transcription successful ({hypothesis.description}).")
            return TranscriptionResult.success(transcript, attempts=tuple(attempts))

        self._log("[STT] All encodings failed.")
        return TranscriptionResult.failure(
            TranscriptionErrorKind.NO_TRANSCRIPT_FOUND, attempts=tuple(attempts)
        )

    def build_request(self, content: str, hypothesis: EncodingHypothesis) -> dict[str, Any]:
        return {
            "config": {
                "encoding": hypothesis.encoding.value,
                "sampleRateHertz": hypothesis.sample_rate_hertz,
                "languageCode": self.config.language_code,
                "enableAutomaticPunctuation": True,
                "model": self.config.model,
            },
            "audio": {
                "content": content,
            },
        }

    def _encode_audio(self, audio_handle: str) -> str:
        if not audio_handle:
            raise ValueError("audio handle is empty")

        data = self.platform.read_artifact(audio_handle)
        self._log(f"[STT] Audio file read successfully, {len(data)} bytes.")
        return base64.b64encode(data).decode("ascii")

    def _mock_result(
        self, attempts: tuple[TranscriptionAttempt, ...]
    ) -> TranscriptionResult:
        self.sleep(self.config.mock_delay_seconds)
        return TranscriptionResult.success(
            pick_mock_transcript(self.rng), attempts=attempts, mocked=True
        )

    def _log(self, message: str) -> None:
        if self.logger:
            self.logger.log(message)


def extract_transcript(response: Any) -> str:
    """Return ``results[0].alternatives[0].transcript`` or an empty string.

    Any unexpected shape along the way counts as no transcript.
    """
    if not isinstance(response, dict):
        return ""

    results = response.get("results")
    if not isinstance(results, list) or not results or not isinstance(results[0], dict):
        return ""

    alternatives = results[0].get("alternatives")
    if (
        not isinstance(alternatives, list)
        or not alternatives
        or not isinstance(alternatives[0], dict)
    ):
        return ""

    transcript = alternatives[0].get("transcript")
    if not isinstance(transcript, str):
        return ""
    return transcript.strip()
