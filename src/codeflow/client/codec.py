"""Payload codecs for provider responses.

:class:`JSONCodec` is the JSON collaborator handed to strategies. Token
endpoints do not always answer in JSON (some still reply with
``application/x-www-form-urlencoded`` or ``text/plain`` bodies), so
:func:`decode_body` picks the decoder from the response content type.
"""

from __future__ import annotations

import json
from typing import Any
from urllib.parse import parse_qsl

from codeflow.exceptions import DecodeError
from codeflow.models import HTTPResponse

_FORM_TYPE = "application/x-www-form-urlencoded"
_TEXT_TYPE = "text/plain"


class JSONCodec:
    """Encode and decode JSON payloads with the standard library."""

    def decode(self, data: bytes | str) -> Any:
        """Decode *data* as JSON.

        Raises:
            DecodeError: If *data* is empty or not valid JSON.
        """
        if not data:
            raise DecodeError("Empty JSON payload")
        try:
            return json.loads(data)
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DecodeError(f"Invalid JSON payload: {exc}") from exc

    def encode(self, value: Any) -> bytes:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def decode_form(data: bytes | str) -> dict[str, str]:
    """Decode an ``application/x-www-form-urlencoded`` payload.

    Raises:
        DecodeError: If *data* holds no ``key=value`` pairs.
    """
    text = data.decode("utf-8", errors="replace") if isinstance(data, bytes) else data
    pairs = parse_qsl(text.strip(), keep_blank_values=True)
    if not pairs:
        raise DecodeError("Invalid form payload")
    return dict(pairs)


def decode_body(response: HTTPResponse, codec: JSONCodec) -> Any:
    """Decode a response body according to its content type.

    Form bodies are parsed as form data. Plain-text bodies go through
    *codec* first and fall back to form data when they are not JSON.
    Everything else, including responses without a content type, goes
    through *codec*.

    Raises:
        DecodeError: If the body cannot be decoded.
    """
    if response.content_type == _FORM_TYPE:
        return decode_form(response.body)
    if response.content_type == _TEXT_TYPE:
        try:
            return codec.decode(response.body)
        except DecodeError:
            return decode_form(response.body)
    return codec.decode(response.body)
