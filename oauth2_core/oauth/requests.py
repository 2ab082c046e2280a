"""OAuth 2.0 request model.

Each grant type is a frozen value object that knows its endpoint URLs and
the headers/parameters the grant requires (RFC 6749 Sections 4.1, 4.4 and 6).
A request renders itself into an ``httpx.Request`` against any target URL.
"""

import base64
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from ..utils.errors import InvalidRequestURLError


def parse_absolute_url(value: str, require_host: bool = True) -> httpx.URL | None:
    """Parse a URL string, returning None if it is not an absolute URL.

    Args:
        value: URL string to parse
        require_host: Also require a network location (false for custom-scheme redirect URIs)

    Returns:
        Parsed URL, or None if the string does not parse
    """
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        url = httpx.URL(value)
    except (httpx.InvalidURL, TypeError, ValueError):
        return None
    if not url.scheme:
        return None
    if require_host and not url.host:
        return None
    return url


def _require_url(field_name: str, value: str, require_host: bool = True) -> None:
    if parse_absolute_url(value, require_host=require_host) is None:
        raise InvalidRequestURLError(field_name, value)


def render_request(
    url: str | httpx.URL,
    parameters: Mapping[str, str],
    headers: Mapping[str, str],
    method: str = "POST",
    extra_headers: Mapping[str, str] | None = None,
) -> httpx.Request:
    """Build a transport-ready request.

    Parameters are appended after any query items already present on ``url``.
    ``headers`` overwrite same-named entries in ``extra_headers``.

    Raises:
        InvalidRequestURLError: If ``url`` is not an absolute URL
    """
    target = parse_absolute_url(str(url), require_host=False)
    if target is None:
        raise InvalidRequestURLError("target URL", str(url))

    query = list(target.params.multi_items()) + list(parameters.items())
    target = target.copy_with(params=httpx.QueryParams(query))

    request_headers = httpx.Headers({"Accept": "application/json"})
    if extra_headers:
        request_headers.update(extra_headers)
    request_headers.update(headers)

    return httpx.Request(method, target, headers=request_headers)


class OAuthRequest(ABC):
    """Base class for OAuth 2.0 grant requests.

    Subclasses provide the grant's parameters and headers. Endpoint URLs a
    grant does not use stay None.
    """

    grant_type: str
    authorization_url: str | None
    token_url: str | None

    @property
    @abstractmethod
    def headers(self) -> dict[str, str]:
        """HTTP headers the grant requires."""

    @property
    @abstractmethod
    def parameters(self) -> dict[str, str]:
        """Request parameters the grant requires."""

    def to_http_request(
        self,
        url: str | httpx.URL,
        method: str = "POST",
        extra_headers: Mapping[str, str] | None = None,
    ) -> httpx.Request:
        """Render this request's headers and parameters against ``url``."""
        return render_request(
            url, self.parameters, self.headers, method=method, extra_headers=extra_headers
        )


@dataclass(frozen=True)
class AuthorizationCodeRequest(OAuthRequest):
    """Three-legged ``authorization_code`` request (RFC 6749 Section 4.1).

    ``parameters`` are those sent to the authorization endpoint. The token
    exchange parameters depend on the code returned in the redirect and are
    produced by ``token_exchange_parameters``.
    """

    grant_type = "authorization_code"

    authorization_url: str
    token_url: str
    client_id: str
    client_secret: str
    redirect_url: str
    scope: str | None = None
    state: str | None = None
    extra_parameters: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self):
        _require_url("authorization URL", self.authorization_url)
        _require_url("token URL", self.token_url)
        _require_url("redirect URL", self.redirect_url, require_host=False)

    @property
    def headers(self) -> dict[str, str]:
        return {}

    @property
    def parameters(self) -> dict[str, str]:
        params = dict(self.extra_parameters)
        params.update(
            {
                "response_type": "code",
                "client_id": self.client_id,
                "redirect_uri": self.redirect_url,
            }
        )
        if self.scope is not None:
            params["scope"] = self.scope
        if self.state is not None:
            params["state"] = self.state
        return params

    def token_exchange_parameters(self, code: str) -> dict[str, str]:
        """Parameters for trading ``code`` at the token endpoint."""
        return {
            "grant_type": self.grant_type,
            "code": code,
            "redirect_uri": self.redirect_url,
            "client_id": self.client_id,
            "client_secret": self.client_secret,
        }

    def authorization_request(self) -> httpx.Request:
        """The page the user is sent to, with the authorization parameters."""
        return self.to_http_request(self.authorization_url, method="GET")

    def token_exchange_request(
        self, code: str, extra_headers: Mapping[str, str] | None = None
    ) -> httpx.Request:
        """The token endpoint request for an authorization code."""
        return render_request(
            self.token_url,
            self.token_exchange_parameters(code),
            self.headers,
            extra_headers=extra_headers,
        )


@dataclass(frozen=True)
class ClientCredentialsRequest(OAuthRequest):
    """Two-legged ``client_credentials`` request (RFC 6749 Section 4.4).

    Credentials travel either in an ``Authorization: Basic`` header (default)
    or as ``client_id``/``client_secret`` parameters, never both.
    """

    grant_type = "client_credentials"

    authorization_url: str
    client_id: str
    client_secret: str
    use_authorization_header: bool = True
    scope: str | None = None
    extra_parameters: Mapping[str, str] = field(default_factory=dict, hash=False)
    token_url: str | None = field(default=None, init=False)

    def __post_init__(self):
        _require_url("authorization URL", self.authorization_url)

    @property
    def headers(self) -> dict[str, str]:
        if not self.use_authorization_header:
            return {}
        credentials = f"{self.client_id}:{self.client_secret}".encode("utf-8")
        return {"Authorization": f"Basic {base64.b64encode(credentials).decode('ascii')}"}

    @property
    def parameters(self) -> dict[str, str]:
        params = dict(self.extra_parameters)
        params["grant_type"] = self.grant_type
        if not self.use_authorization_header:
            params["client_id"] = self.client_id
            params["client_secret"] = self.client_secret
        if self.scope is not None:
            params["scope"] = self.scope
        return params


@dataclass(frozen=True)
class RefreshTokenRequest(OAuthRequest):
    """``refresh_token`` request (RFC 6749 Section 6)."""

    grant_type = "refresh_token"

    token_url: str
    client_id: str
    client_secret: str
    refresh_token: str
    scope: str | None = None
    extra_parameters: Mapping[str, str] = field(default_factory=dict, hash=False)
    authorization_url: str | None = field(default=None, init=False)

    def __post_init__(self):
        _require_url("token URL", self.token_url)

    @property
    def headers(self) -> dict[str, str]:
        return {}

    @property
    def parameters(self) -> dict[str, str]:
        params = dict(self.extra_parameters)
        params.update(
            {
                "grant_type": self.grant_type,
                "refresh_token": self.refresh_token,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
            }
        )
        if self.scope is not None:
            params["scope"] = self.scope
        return params


GrantRequest = AuthorizationCodeRequest | ClientCredentialsRequest | RefreshTokenRequest
