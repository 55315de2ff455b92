from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    import numpy as np

    AudioArray = np.ndarray
else:
    AudioArray = Any


class TextToSpeech(Protocol):
    sample_rate: int

    def synthesize(self, text: str) -> AudioArray:
        """Synthesize speech audio (float32 PCM ndarray) from text."""
        ...


class AudioOutput(Protocol):
    def play(self, audio: AudioArray, *, sample_rate: int) -> None:
        """Start playing PCM audio without waiting for it to finish."""
        ...

    def stop(self) -> None:
        ...
