"""Loopback redirect presenter for the authorization code flow.

Opens the authorization page in the system browser and listens on the
redirect URI (which must point at this machine) for the server's redirect.
Whatever query the redirect carries is handed back to the orchestrator,
which decides between code, error and missing parameters.
"""

import asyncio
import html
import inspect
import logging
import webbrowser
from collections.abc import Callable, Mapping
from typing import Any
from urllib.parse import urlencode

import httpx
from aiohttp import web

from ..utils.errors import ConfigurationError
from .transport import LoadError, Redirection, RedirectOutcome

logger = logging.getLogger(__name__)

LOOPBACK_HOSTS = {"localhost", "127.0.0.1", "::1"}

_SUCCESS_PAGE = """
<html>
<head><title>Authorization Complete</title></head>
<body style="font-family: sans-serif; text-align: center; padding: 50px;">
    <h1>Authorization Complete</h1>
    <p>You can close this window and return to the application.</p>
</body>
</html>
"""

_ERROR_PAGE = """
<html>
<head><title>Authorization Failed</title></head>
<body style="font-family: sans-serif; text-align: center; padding: 50px;">
    <h1>Authorization Failed</h1>
    <p><strong>Error:</strong> {error}</p>
    <p>{description}</p>
    <p>Please close this window and try again.</p>
</body>
</html>
"""


def callback_url(redirect_url: httpx.URL, raw_query: str, query: Mapping[str, str]) -> str:
    """Rebuild the URL the browser was redirected to.

    The raw query is kept as sent. A client that sends unescaped non-ASCII
    gets its decoded parameters re-encoded instead.
    """
    try:
        encoded = raw_query.encode("ascii")
    except UnicodeEncodeError:
        encoded = urlencode(list(query.items())).encode("ascii")
    return str(redirect_url.copy_with(query=encoded or None))


class LoopbackRedirectReceiver:
    """Redirect presenter that uses the system browser and a local HTTP server.

    Example:
        client = OAuth2Client(presenter=LoopbackRedirectReceiver(timeout=120))
        response = await client.authorize(
            AuthorizationCodeRequest(
                authorization_url="https://auth.example.com/authorize",
                token_url="https://auth.example.com/token",
                client_id="my-client",
                client_secret="my-secret",
                redirect_url="http://localhost:8889/callback",
            )
        )
    """

    def __init__(
        self,
        timeout: float = 300.0,
        open_browser: Callable[[str], Any] = webbrowser.open,
    ):
        """Initialize the receiver.

        Args:
            timeout: Seconds to wait for the redirect before reporting a LoadError
            open_browser: Callable that shows the authorization URL. May be sync or async.
        """
        self.timeout = timeout
        self.open_browser = open_browser

    async def __call__(
        self, authorization_url: httpx.URL, redirect_url: httpx.URL
    ) -> RedirectOutcome:
        if redirect_url.host not in LOOPBACK_HOSTS:
            return LoadError(
                ConfigurationError(f"Redirect URL {redirect_url} is not a loopback address")
            )

        port = redirect_url.port or (443 if redirect_url.scheme == "https" else 80)
        path = redirect_url.path or "/"

        received: asyncio.Future[str] = asyncio.get_running_loop().create_future()

        async def callback(request: web.Request) -> web.Response:
            if not received.done():
                received.set_result(
                    callback_url(redirect_url, request.rel_url.raw_query_string, request.query)
                )

            if "error" in request.query:
                return web.Response(
                    text=_ERROR_PAGE.format(
                        error=html.escape(request.query.get("error", "")),
                        description=html.escape(request.query.get("error_description", "")),
                    ),
                    content_type="text/html",
                )
            return web.Response(text=_SUCCESS_PAGE, content_type="text/html")

        app = web.Application()
        app.router.add_get(path, callback)

        runner = web.AppRunner(app)
        await runner.setup()
        try:
            site = web.TCPSite(runner, redirect_url.host, port)
            await site.start()
        except OSError as e:
            logger.error(f"Could not listen on {redirect_url.host}:{port}: {e}")
            await runner.cleanup()
            return LoadError(e)

        logger.info(f"Callback server listening on {redirect_url.copy_with(query=None)}")

        try:
            logger.info("Opening browser for authorization")
            opened = self.open_browser(str(authorization_url))
            if inspect.isawaitable(opened):
                await opened

            logger.info("Waiting for authorization...")
            url = await asyncio.wait_for(received, timeout=self.timeout)
        except TimeoutError as e:
            logger.error("Authorization timeout")
            return LoadError(e)
        finally:
            await runner.cleanup()

        return Redirection(url)
