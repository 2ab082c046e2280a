"""Injectable capabilities used by the flow orchestrator.

The orchestrator never talks to the network or a browser directly. It is
given two async callables:

- an HTTP capability that sends an ``httpx.Request`` and returns the
  ``httpx.Response`` (raising ``httpx.HTTPError`` or ``TransportError`` on
  network failure);
- a redirect presenter that shows the authorization page and reports where
  the user ended up, as ``Redirection`` or ``LoadError``.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Redirection:
    """The authorization page redirected to ``url`` (query string included)."""

    url: str


@dataclass(frozen=True)
class LoadError:
    """The authorization page could not be completed."""

    error: BaseException


RedirectOutcome = Redirection | LoadError

# Type aliases for the injected capabilities
HttpCapability = Callable[[httpx.Request], Awaitable[httpx.Response]]
RedirectPresenter = Callable[[httpx.URL, httpx.URL], Awaitable[RedirectOutcome]]


class HttpxTransport:
    """Default HTTP capability backed by ``httpx.AsyncClient``.

    Without a client, a short-lived ``AsyncClient`` is opened per request.
    A caller-supplied client is reused and never closed here.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
        user_agent: str | None = None,
    ):
        """Initialize the transport.

        Args:
            timeout: Request timeout in seconds (ignored when ``client`` is given)
            client: Optional shared AsyncClient
            user_agent: Optional User-Agent header added to every request
        """
        self.timeout = timeout
        self.client = client
        self.user_agent = user_agent

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        if self.user_agent and "User-Agent" not in request.headers:
            request.headers["User-Agent"] = self.user_agent

        logger.debug(f"{request.method} {request.url.copy_with(query=None)}")

        if self.client is not None:
            return await self._send(self.client, request)

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._send(client, request)

    @staticmethod
    async def _send(client: httpx.AsyncClient, request: httpx.Request) -> httpx.Response:
        response = await client.send(request)
        logger.debug(f"Token endpoint responded with HTTP {response.status_code}")
        return response
