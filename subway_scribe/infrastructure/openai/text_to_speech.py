from __future__ import annotations

import numpy as np
from openai import OpenAI, OpenAIError

from subway_scribe.application.errors import TextToSpeechError

# The speech endpoint's "pcm" format is 24 kHz, 16-bit, mono.
PCM_SAMPLE_RATE = 24_000


class TextToSpeech:
    sample_rate = PCM_SAMPLE_RATE

    def __init__(
        self,
        *,
        client: OpenAI,
        model: str = "gpt-4o-mini-tts",
        voice: str = "alloy",
    ):
        self.client = client
        self.model = model
        self.voice = voice

    def synthesize(self, text: str) -> np.ndarray:
        text = text.strip()
        if not text:
            return np.zeros(0, dtype=np.float32)

        try:
            response = self.client.audio.speech.create(
                model=self.model,
                voice=self.voice,
                input=text,
                response_format="pcm",
            )
            pcm_bytes = response.read()
        except OpenAIError as e:
            raise TextToSpeechError(str(e)) from e

        audio_int16 = np.frombuffer(pcm_bytes, dtype=np.int16)
        return audio_int16.astype(np.float32) / 32767.0
