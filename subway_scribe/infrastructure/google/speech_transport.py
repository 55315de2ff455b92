from __future__ import annotations

from typing import Any

import httpx

from subway_scribe.application.errors import InvalidCredentialsError, SpeechTransportError

INVALID_KEY_MESSAGE = "API key not valid"
INVALID_KEY_REASON = "API_KEY_INVALID"


class GoogleSpeechTransport:
    """POSTs recognition requests to the Speech-to-Text v1 REST endpoint."""

    def __init__(self, *, client: httpx.Client, endpoint: str) -> None:
        self.client = client
        self.endpoint = endpoint

    def recognize(self, body: dict[str, Any], *, api_key: str) -> dict[str, Any]:
        try:
            response = self.client.post(
                self.endpoint,
                params={"key": api_key},
                json=body,
            )
        except httpx.HTTPError as e:
            raise SpeechTransportError(f"Request failed: {e}") from e

        try:
            data = response.json()
        except ValueError as e:
            raise SpeechTransportError(
                f"Invalid JSON response (status {response.status_code})."
            ) from e

        if not isinstance(data, dict):
            raise SpeechTransportError(
                f"Unexpected response shape (status {response.status_code})."
            )

        if response.is_error:
            message = _error_message(data)
            if _is_invalid_key(data):
                raise InvalidCredentialsError(message or INVALID_KEY_MESSAGE)
            raise SpeechTransportError(
                f"Google API error {response.status_code}: {message or response.reason_phrase}"
            )

        return data


def _error_message(data: dict[str, Any]) -> str:
    error = data.get("error")
    if not isinstance(error, dict):
        return ""
    return str(error.get("message") or "")


def _is_invalid_key(data: dict[str, Any]) -> bool:
    if INVALID_KEY_MESSAGE in _error_message(data):
        return True

    error = data.get("error")
    if not isinstance(error, dict):
        return False
    for detail in error.get("details") or []:
        if isinstance(detail, dict) and detail.get("reason") == INVALID_KEY_REASON:
            return True
    return False
