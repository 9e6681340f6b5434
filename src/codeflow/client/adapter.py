"""HTTP client adapters used by strategies to talk to providers.

Strategies only depend on the :class:`HTTPAdapter` interface: a single
:meth:`~HTTPAdapter.request` call that returns an
:class:`~codeflow.models.HTTPResponse` for *any* HTTP status and raises
:class:`~codeflow.exceptions.TransportError` when no response was
received at all. Status classification is left to the caller.

:class:`HttpxAdapter` is the default implementation, built on
:class:`httpx.Client`. Timeouts and TLS verification are configured per
deployment; the adapter never retries.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Optional, Union

import httpx

from codeflow.exceptions import TransportError
from codeflow.models import HTTPResponse

logger = logging.getLogger(__name__)

Body = Union[bytes, str, None]


class HTTPAdapter(ABC):
    """Interface for performing HTTP requests on behalf of a strategy."""

    @abstractmethod
    def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Body = None,
    ) -> HTTPResponse:
        """Send a request and return the response, whatever its status.

        Args:
            method: HTTP method, e.g. ``"GET"`` or ``"POST"``.
            url: Absolute URL including any query string.
            headers: Request headers.
            body: Encoded request body (form or JSON), or ``None``.

        Returns:
            The :class:`~codeflow.models.HTTPResponse`.

        Raises:
            TransportError: If the request could not be completed
                (DNS failure, refused connection, timeout).
        """
        ...


class HttpxAdapter(HTTPAdapter):
    """:class:`HTTPAdapter` backed by :class:`httpx.Client`.

    Without an explicit *client*, a short-lived client is opened per
    request so that no connection state is shared between callbacks. Pass
    a long-lived :class:`httpx.Client` to pool connections.

    Args:
        timeout: Per-request timeout in seconds.
        verify_ssl: Verify TLS certificates.
        transport: Optional httpx transport (e.g. :class:`httpx.MockTransport`).
        client: Optional pre-configured client; takes precedence over the
            other arguments.

    Example::

        adapter = HttpxAdapter(timeout=10.0)
        response = adapter.request("GET", "https://provider.example.com/api/user")
    """

    def __init__(
        self,
        timeout: float = 30.0,
        verify_ssl: bool = True,
        transport: Optional[httpx.BaseTransport] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._timeout = timeout
        self._verify_ssl = verify_ssl
        self._transport = transport
        self._client = client

    def request(
        self,
        method: str,
        url: str,
        headers: Optional[dict[str, str]] = None,
        body: Body = None,
    ) -> HTTPResponse:
        logger.debug("%s %s", method.upper(), _strip_query(url))
        try:
            if self._client is not None:
                response = self._client.request(method, url, headers=headers, content=body)
            else:
                with httpx.Client(
                    timeout=self._timeout,
                    verify=self._verify_ssl,
                    transport=self._transport,
                ) as client:
                    response = client.request(method, url, headers=headers, content=body)
        except (httpx.RequestError, httpx.InvalidURL) as exc:
            raise TransportError(
                f"{method.upper()} {_strip_query(url)} failed: {exc}"
            ) from exc

        return HTTPResponse(
            status=response.status_code,
            headers={k.lower(): v for k, v in response.headers.items()},
            body=response.content,
        )


def _strip_query(url: str) -> str:
    """Drop the query string so tokens passed as params never reach logs."""
    return url.split("?", 1)[0]
