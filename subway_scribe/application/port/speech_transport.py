from __future__ import annotations

from typing import Any, Protocol


class SpeechTransport(Protocol):
    def recognize(self, body: dict[str, Any], *, api_key: str) -> dict[str, Any]:
        """Send one recognition request and return the decoded JSON response.

        Raises InvalidCredentialsError when the key is rejected and
        SpeechTransportError for any other failure.
        """
        ...
