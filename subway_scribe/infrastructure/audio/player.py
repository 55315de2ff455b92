from __future__ import annotations

from threading import Lock

import numpy as np
import sounddevice as sd

from subway_scribe.application.errors import AudioDeviceError


class Player:
    """Fire-and-forget PCM playback on the default output device."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._playing = False

    def play(self, audio: np.ndarray, *, sample_rate: int) -> None:
        audio_float = np.asarray(audio, dtype=np.float32)
        if audio_float.size == 0:
            return
        if audio_float.ndim == 1:
            audio_float = audio_float.reshape(-1, 1)

        with self._lock:
            # sounddevice plays one buffer at a time; a new one replaces the old.
            try:
                sd.stop()
                sd.play(audio_float, samplerate=sample_rate)
            except (sd.PortAudioError, OSError, RuntimeError, ValueError) as e:
                self._playing = False
                raise AudioDeviceError(f"Could not start playback: {e}") from e
            self._playing = True

    def wait(self) -> None:
        """Block until the current buffer has finished playing."""
        try:
            sd.wait()
        except (sd.PortAudioError, OSError, RuntimeError, ValueError) as e:
            raise AudioDeviceError(f"Playback failed: {e}") from e
        finally:
            with self._lock:
                self._playing = False

    def stop(self) -> None:
        with self._lock:
            if not self._playing:
                return
            try:
                sd.stop()
            except (sd.PortAudioError, OSError, RuntimeError, ValueError) as e:
                raise AudioDeviceError(f"Could not stop playback: {e}") from e
            finally:
                self._playing = False
