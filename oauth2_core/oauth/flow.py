"""OAuth 2.0 flow orchestration.

``FlowAttempt`` is the state machine for one exchange:

    IDLE -> AWAITING_USER_REDIRECT -> AWAITING_TOKEN_EXCHANGE -> TERMINAL   (authorization code)
    IDLE -> AWAITING_TOKEN_EXCHANGE -> TERMINAL                             (other grants)

It ends in exactly one ``Response``. ``OAuth2Client`` binds the HTTP and
redirect capabilities once and starts a fresh attempt per call, so
concurrent calls share no mutable state.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from enum import Enum

import httpx

from ..core.config import Settings
from ..utils.errors import (
    CompletionAlreadyInvokedError,
    FlowAlreadyCompletedError,
    PresenterNotConfiguredError,
)
from .failures import MissingParametersInRedirectionURI, UnexpectedServerResponse
from .loopback import LoopbackRedirectReceiver
from .requests import (
    AuthorizationCodeRequest,
    ClientCredentialsRequest,
    GrantRequest,
    RefreshTokenRequest,
    parse_absolute_url,
)
from .responses import ErrorData, Failure, Response, decode_response
from .transport import (
    HttpCapability,
    HttpxTransport,
    LoadError,
    Redirection,
    RedirectPresenter,
)

logger = logging.getLogger(__name__)

# Type alias for the caller's completion handler
Completion = Callable[[Response], Awaitable[None] | None]


class FlowState(Enum):
    """States of a single flow attempt."""

    IDLE = "idle"
    AWAITING_USER_REDIRECT = "awaiting_user_redirect"
    AWAITING_TOKEN_EXCHANGE = "awaiting_token_exchange"
    TERMINAL = "terminal"


class SingleShotCompletion:
    """Wraps a completion handler so it can fire only once.

    Handlers may be plain functions or coroutine functions.
    """

    def __init__(self, handler: Completion):
        self.handler = handler
        self.invoked = False

    async def __call__(self, response: Response) -> None:
        if self.invoked:
            raise CompletionAlreadyInvokedError()
        self.invoked = True

        result = self.handler(response)
        # Handle both sync and async handlers
        if asyncio.iscoroutine(result):
            await result


def _redirect_parameters(url: str) -> dict[str, str] | None:
    """Decoded query parameters of a redirect URL, or None if it does not parse."""
    parsed = parse_absolute_url(url, require_host=False)
    if parsed is None:
        return None
    return dict(parsed.params.items())


class FlowAttempt:
    """State machine for one OAuth exchange. Run it once."""

    def __init__(
        self,
        request: GrantRequest,
        http: HttpCapability,
        presenter: RedirectPresenter | None = None,
        extra_headers: Mapping[str, str] | None = None,
    ):
        """Initialize a flow attempt.

        Args:
            request: Grant request to run
            http: Capability that performs the token endpoint request
            presenter: Capability that shows the authorization page (authorization code only)
            extra_headers: Headers added to token endpoint requests (request headers win)

        Raises:
            PresenterNotConfiguredError: If ``request`` is an authorization code
                request and no presenter is given
        """
        if isinstance(request, AuthorizationCodeRequest) and presenter is None:
            raise PresenterNotConfiguredError()

        self.request = request
        self.http = http
        self.presenter = presenter
        self.extra_headers = dict(extra_headers or {})
        self.state = FlowState.IDLE
        self.response: Response | None = None

    def _transition(self, state: FlowState) -> None:
        logger.debug(f"{type(self.request).__name__}: {self.state.value} -> {state.value}")
        self.state = state

    async def run(self) -> Response:
        """Drive the flow to its terminal response.

        Returns:
            Success with the issued credentials, or a classified Failure

        Raises:
            FlowAlreadyCompletedError: If this attempt has already been run
            TypeError: If the request is not a supported grant type
        """
        if self.state is not FlowState.IDLE:
            raise FlowAlreadyCompletedError()

        request = self.request
        logger.info(f"Starting {request.grant_type} flow")

        match request:
            case AuthorizationCodeRequest():
                response = await self._run_authorization_code(request)
            case ClientCredentialsRequest():
                response = await self._exchange(
                    request.to_http_request(
                        request.authorization_url, extra_headers=self.extra_headers
                    )
                )
            case RefreshTokenRequest():
                response = await self._exchange(
                    request.to_http_request(request.token_url, extra_headers=self.extra_headers)
                )
            case _:
                raise TypeError(f"Unsupported OAuth request type: {type(request).__name__}")

        self._transition(FlowState.TERMINAL)
        self.response = response

        if isinstance(response, Failure):
            logger.warning(f"{request.grant_type} flow failed: {response.failure.message}")
        else:
            logger.info(f"{request.grant_type} flow succeeded")
        return response

    async def _run_authorization_code(self, request: AuthorizationCodeRequest) -> Response:
        self._transition(FlowState.AWAITING_USER_REDIRECT)
        authorization_page = request.authorization_request().url

        try:
            outcome = await self.presenter(authorization_page, httpx.URL(request.redirect_url))
        except Exception as e:
            logger.warning(f"Authorization page failed to complete: {e}")
            outcome = LoadError(e)

        match outcome:
            case Redirection(url=url):
                return await self._handle_redirection(request, url)
            case LoadError(error=error):
                return Failure(UnexpectedServerResponse(cause=error))
            case _:
                raise TypeError(f"Unsupported redirect outcome: {type(outcome).__name__}")

    async def _handle_redirection(self, request: AuthorizationCodeRequest, url: str) -> Response:
        params = _redirect_parameters(url)
        if params is None:
            logger.warning("Redirection URI could not be parsed")
            return Failure(MissingParametersInRedirectionURI())

        if request.state is not None and params.get("state") != request.state:
            logger.warning("Redirection URI state does not match the requested state")

        if "code" in params:
            logger.info("Received authorization code, exchanging for tokens...")
            return await self._exchange(
                request.token_exchange_request(params["code"], extra_headers=self.extra_headers)
            )

        if "error" in params:
            return Failure(ErrorData.from_query(params).as_authorization_failure())

        return Failure(MissingParametersInRedirectionURI())

    async def _exchange(self, http_request: httpx.Request) -> Response:
        self._transition(FlowState.AWAITING_TOKEN_EXCHANGE)

        try:
            http_response = await self.http(http_request)
            body = await http_response.aread()
        except Exception as e:
            # Includes httpx errors, TransportError, OSError and TimeoutError
            logger.error(f"Token endpoint request failed: {e!r}")
            return Failure(UnexpectedServerResponse(cause=e))

        return decode_response(body, http_response.status_code, dict(http_response.headers))


class OAuth2Client:
    """Entry point for running OAuth 2.0 grants.

    Capabilities are bound here and passed to each attempt; nothing is
    swapped through global state.

    Example:
        client = OAuth2Client()
        response = await client.authorize(
            ClientCredentialsRequest(
                authorization_url="https://auth.example.com/token",
                client_id="my-client",
                client_secret="my-secret",
            )
        )
        if response.is_success:
            print(response.data.access_token)
    """

    def __init__(
        self,
        http: HttpCapability | None = None,
        presenter: RedirectPresenter | None = None,
        settings: Settings | None = None,
        extra_headers: Mapping[str, str] | None = None,
    ):
        """Initialize the client.

        Args:
            http: HTTP capability (default: HttpxTransport configured from settings)
            presenter: Redirect presenter for authorization code requests
            settings: Client settings (default: loaded from OAUTH2_* environment variables)
            extra_headers: Headers added to every token endpoint request
        """
        self.settings = settings or Settings()
        self.http = http or HttpxTransport(
            timeout=self.settings.http_timeout, user_agent=self.settings.user_agent
        )
        self.presenter = presenter
        self.extra_headers = dict(extra_headers or {})

    @classmethod
    def with_browser(cls, settings: Settings | None = None, **kwargs) -> "OAuth2Client":
        """Create a client that completes authorization code flows in the system browser."""
        settings = settings or Settings()
        presenter = LoopbackRedirectReceiver(timeout=settings.redirect_timeout)
        return cls(presenter=presenter, settings=settings, **kwargs)

    async def authorize(
        self, request: GrantRequest, completion: Completion | None = None
    ) -> Response:
        """Run any supported grant to completion.

        Args:
            request: Grant request (a fresh instance per exchange)
            completion: Optional handler called exactly once with the response

        Returns:
            The terminal Response

        Raises:
            PresenterNotConfiguredError: If ``request`` is an authorization code
                request and this client has no presenter. Checked before any
                network or browser activity.
        """
        attempt = FlowAttempt(
            request, self.http, presenter=self.presenter, extra_headers=self.extra_headers
        )
        response = await attempt.run()

        if completion is not None:
            await SingleShotCompletion(completion)(response)
        return response

    async def refresh(
        self, request: RefreshTokenRequest, completion: Completion | None = None
    ) -> Response:
        """Exchange a refresh token for new credentials.

        Raises:
            TypeError: If ``request`` is not a RefreshTokenRequest
        """
        if not isinstance(request, RefreshTokenRequest):
            raise TypeError(f"refresh() requires a RefreshTokenRequest, got {type(request).__name__}")
        return await self.authorize(request, completion)
