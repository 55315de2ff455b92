from __future__ import annotations

from typing import Protocol


class CaptureStream(Protocol):
    def release(self) -> None:
        """Free the underlying device stream. Safe to call more than once."""
        ...


class Playback(Protocol):
    def stop(self) -> None:
        """Stop playback and free its resources. Safe to call more than once."""
        ...


class AudioPlatform(Protocol):
    def request_permission(self) -> bool:
        """Return True when the microphone may be used."""
        ...

    def set_recording_mode(self, enabled: bool) -> None:
        """Switch the device between recording and normal playback interaction."""
        ...

    def open_stream(self) -> CaptureStream:
        """Open and start a new capture stream."""
        ...

    def close_stream(self, stream: CaptureStream) -> str:
        """Flush and finalize a capture stream, returning the artifact handle."""
        ...

    def read_artifact(self, handle: str) -> bytes:
        """Return the raw bytes of a finalized artifact."""
        ...

    def play(self, handle: str) -> Playback:
        """Start playing a finalized artifact."""
        ...
