"""Anti-forgery ``state`` tokens for the authorization code flow.

:func:`generate_state` is called when building the authorization URL;
the caller keeps the value (typically in a session) and hands it back on
callback, where :func:`verify_state` compares it with the value the
provider echoed.
"""

from __future__ import annotations

import secrets
from typing import Optional

from codeflow.exceptions import CallbackCSRFError

STATE_BYTES = 32
"""Random bytes per state token (256 bits of entropy)."""


def generate_state() -> str:
    """Generate an unguessable, URL-safe state token.

    Returns:
        A 43-character base64url string.
    """
    return secrets.token_urlsafe(STATE_BYTES)


def verify_state(expected: Optional[str], received: Optional[str]) -> None:
    """Check the state returned by the provider against the expected one.

    Args:
        expected: The state stored when the authorization URL was built.
        received: The ``state`` parameter from the callback request.

    Raises:
        CallbackCSRFError: If either value is missing or empty, or if they
            differ.
    """
    if not expected or not received:
        raise CallbackCSRFError()
    if not secrets.compare_digest(expected.encode("utf-8"), received.encode("utf-8")):
        raise CallbackCSRFError()
