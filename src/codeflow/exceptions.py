"""Exception hierarchy for codeflow.

All exceptions inherit from :class:`CodeflowError`, which carries an
``exit_code`` attribute mapped to a constant from :mod:`codeflow.exit_codes`.
Strategies raise these errors instead of returning partial results: the
first failing step of a callback aborts the remaining ones and the error
reaches the caller unchanged.

Subclass hierarchy::

    CodeflowError          (exit 1)
    +-- InvalidUsageError  (exit 2)
    +-- ConfigurationError (exit 3)
    +-- CallbackError      (exit 4)
    +-- CallbackCSRFError  (exit 5)
    +-- RequestError       (exit 6)
    +-- TransportError     (exit 6)
    +-- DecodeError        (exit 1)
"""

from __future__ import annotations

import enum
from typing import Optional

from codeflow.exit_codes import (
    EXIT_CALLBACK_ERROR,
    EXIT_CONFIGURATION_ERROR,
    EXIT_CSRF_ERROR,
    EXIT_GENERIC_FAILURE,
    EXIT_INVALID_USAGE,
    EXIT_REQUEST_ERROR,
)

_BODY_EXCERPT_LENGTH = 500


class CodeflowError(Exception):
    """Base exception for all codeflow errors.

    Args:
        message: Human-readable error description.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        self.message = message
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidUsageError(CodeflowError):
    """Raised for invalid CLI arguments."""

    exit_code = EXIT_INVALID_USAGE


class ConfigurationError(CodeflowError):
    """Raised when a required endpoint, credential, or config file is missing or invalid."""

    exit_code = EXIT_CONFIGURATION_ERROR


class CallbackError(CodeflowError):
    """Raised when the provider redirects back with an ``error`` parameter.

    The provider's fields are kept verbatim so that callers can match on
    ``error`` (e.g. ``"access_denied"``) or show ``error_description``.

    Args:
        error: The provider's error code.
        error_description: Optional human-readable description.
        error_uri: Optional link to provider documentation for the error.
    """

    exit_code = EXIT_CALLBACK_ERROR

    def __init__(
        self,
        error: str,
        error_description: Optional[str] = None,
        error_uri: Optional[str] = None,
    ):
        super().__init__(error_description or error)
        self.error = error
        self.error_description = error_description
        self.error_uri = error_uri


class CallbackCSRFError(CodeflowError):
    """Raised when the callback ``state`` is missing or does not match the expected one."""

    exit_code = EXIT_CSRF_ERROR

    def __init__(self, message: str = "CSRF detected: state parameter is missing or invalid"):
        super().__init__(message)


class RequestErrorKind(str, enum.Enum):
    """Classification of a failed request to the provider."""

    UNREACHABLE = "unreachable"
    UNEXPECTED_RESPONSE = "unexpected_response"
    INVALID_SERVER_RESPONSE = "invalid_server_response"
    UNAUTHORIZED = "unauthorized"


class RequestError(CodeflowError):
    """Raised when a request to the provider fails or returns an unusable response.

    Transport failures chain the adapter's :class:`TransportError` as
    ``__cause__``.

    Args:
        message: Human-readable error description.
        error: The failure classification.
        status: HTTP status code of the offending response, if any.
        body: The response body, truncated to a short excerpt.
    """

    exit_code = EXIT_REQUEST_ERROR

    def __init__(
        self,
        message: str,
        error: Optional[RequestErrorKind] = None,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ):
        super().__init__(message)
        self.error = error
        self.status = status
        self.body = body[:_BODY_EXCERPT_LENGTH] if body else body


class TransportError(CodeflowError):
    """Raised by HTTP adapters on network-level failures (DNS, refused connection, timeout)."""

    exit_code = EXIT_REQUEST_ERROR


class DecodeError(CodeflowError, ValueError):
    """Raised by codecs when a payload cannot be decoded."""
