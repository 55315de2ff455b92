from __future__ import annotations

import tempfile
from contextlib import suppress
from datetime import datetime
from pathlib import Path
from threading import Lock

import numpy as np
import sounddevice as sd
from scipy.io import wavfile

from subway_scribe.application.errors import AudioDeviceError
from subway_scribe.infrastructure.audio.player import Player

_PORTAUDIO_ERRORS = (sd.PortAudioError, OSError, RuntimeError, ValueError)


class _InputCapture:
    """A started ``sd.InputStream`` collecting float32 frames in memory."""

    def __init__(self, *, sample_rate: int, channels: int) -> None:
        self.sample_rate = sample_rate
        self.channels = channels

        self._frames: list[np.ndarray] = []
        self._frames_lock = Lock()
        self._released = False

        self._stream = sd.InputStream(
            samplerate=sample_rate,
            channels=channels,
            dtype="float32",
            callback=self._on_audio,
        )
        try:
            self._stream.start()
        except _PORTAUDIO_ERRORS:
            self._released = True
            with suppress(*_PORTAUDIO_ERRORS):
                self._stream.close()
            raise

    def _on_audio(self, indata: np.ndarray, frames: int, time_info, status) -> None:
        # Runs on the PortAudio thread; keep it to a copy and an append.
        with self._frames_lock:
            self._frames.append(indata.copy())

    def finish(self) -> np.ndarray:
        """Stop the stream and return everything captured so far."""
        self._stream.stop()
        with self._frames_lock:
            frames = self._frames
            self._frames = []

        if not frames:
            return np.zeros((0, self.channels), dtype=np.float32)
        return np.concatenate(frames, axis=0)

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        try:
            self._stream.close()
        except _PORTAUDIO_ERRORS as e:
            raise AudioDeviceError(f"Could not close input stream: {e}") from e


class _PlayerPlayback:
    def __init__(self, player: Player) -> None:
        self._player = player

    def stop(self) -> None:
        self._player.stop()


class SoundDeviceAudioPlatform:
    """Desktop audio platform: PortAudio capture, WAV artifacts on disk."""

    def __init__(
        self,
        *,
        sample_rate: int = 16_000,
        channels: int = 1,
        recordings_dir: Path | None = None,
        player: Player | None = None,
    ) -> None:
        self.sample_rate = sample_rate
        self.channels = channels
        self.recordings_dir = recordings_dir
        self.player = player or Player()

        self._recording_mode = False

    @property
    def recording_mode(self) -> bool:
        return self._recording_mode

    def request_permission(self) -> bool:
        # Desktop systems have no runtime prompt; a usable input device is the grant.
        try:
            sd.check_input_settings(
                samplerate=self.sample_rate,
                channels=self.channels,
                dtype="float32",
            )
        except (sd.PortAudioError, ValueError):
            return False
        return True

    def set_recording_mode(self, enabled: bool) -> None:
        if enabled and not self._recording_mode:
            # Silence any playback so it is not captured with the recording.
            self.player.stop()
        self._recording_mode = enabled

    def open_stream(self) -> _InputCapture:
        try:
            return _InputCapture(sample_rate=self.sample_rate, channels=self.channels)
        except _PORTAUDIO_ERRORS as e:
            raise AudioDeviceError(f"Could not open input stream: {e}") from e

    def close_stream(self, stream: _InputCapture) -> str:
        try:
            audio = stream.finish()
        except _PORTAUDIO_ERRORS as e:
            raise AudioDeviceError(f"Could not stop input stream: {e}") from e

        if audio.size == 0:
            raise AudioDeviceError("No audio was captured.")

        audio = np.clip(audio, -1.0, 1.0)
        audio_int16 = (audio * 32767).astype(np.int16)

        path = self._next_artifact_path()
        wavfile.write(path, self.sample_rate, audio_int16)
        return str(path)

    def read_artifact(self, handle: str) -> bytes:
        return Path(handle).read_bytes()

    def play(self, handle: str) -> _PlayerPlayback:
        try:
            sample_rate, data = wavfile.read(handle)
        except (OSError, ValueError) as e:
            raise AudioDeviceError(f"Could not read recording: {e}") from e

        if data.dtype == np.int16:
            audio = data.astype(np.float32) / 32767.0
        else:
            audio = data.astype(np.float32)

        try:
            self.player.play(audio, sample_rate=int(sample_rate))
        except _PORTAUDIO_ERRORS as e:
            raise AudioDeviceError(f"Could not play recording: {e}") from e
        return _PlayerPlayback(self.player)

    def _next_artifact_path(self) -> Path:
        directory = self.recordings_dir
        if directory is None:
            directory = Path(tempfile.gettempdir()) / "subway-scribe"
        directory.mkdir(parents=True, exist_ok=True)

        stamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S-%f")
        return directory / f"recording-{stamp}.wav"
