"""Pytest configuration and fixtures for oauth2-core tests."""

import json
from urllib.parse import urlencode

import httpx
import pytest

from oauth2_core.core.config import Settings
from oauth2_core.oauth.requests import (
    AuthorizationCodeRequest,
    ClientCredentialsRequest,
    RefreshTokenRequest,
)
from oauth2_core.oauth.transport import LoadError, Redirection

AUTHORIZATION_URL = "http://nonexistent.com/authorization"
TOKEN_URL = "http://nonexistent.com/token"
REDIRECT_URL = "http://nonexistent.com/redirection"
CLIENT_ID = "test-client-id"
CLIENT_SECRET = "test-client-secret"
ACCESS_TOKEN = "open sesame"
REFRESH_TOKEN = "ali baba"


class RecordingHttp:
    """HTTP capability that returns canned responses and records requests."""

    def __init__(self, response: httpx.Response | None = None, error: Exception | None = None):
        self.response = response
        self.error = error
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        assert self.response is not None, "RecordingHttp has no response configured"
        return self.response


class RecordingPresenter:
    """Redirect presenter that reports a canned outcome and records its calls."""

    def __init__(self, outcome):
        self.outcome = outcome
        self.calls: list[tuple[httpx.URL, httpx.URL]] = []

    async def __call__(self, authorization_url: httpx.URL, redirect_url: httpx.URL):
        self.calls.append((authorization_url, redirect_url))
        return self.outcome


def json_response(
    status_code: int, body: dict, headers: dict[str, str] | None = None
) -> httpx.Response:
    """Build an httpx.Response with a JSON body."""
    return httpx.Response(
        status_code,
        content=json.dumps(body).encode("utf-8"),
        headers=headers or {"Content-Type": "application/json"},
    )


def redirect_with(params: dict[str, str]) -> Redirection:
    """Redirection to REDIRECT_URL with raw (already encoded) query values."""
    query = "&".join(f"{name}={value}" for name, value in params.items())
    return Redirection(f"{REDIRECT_URL}?{query}")


def redirect_with_encoded(params: dict[str, str]) -> Redirection:
    """Redirection to REDIRECT_URL with form-encoded query values."""
    return Redirection(f"{REDIRECT_URL}?{urlencode(params)}")


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def authorization_code_request() -> AuthorizationCodeRequest:
    return AuthorizationCodeRequest(
        authorization_url=AUTHORIZATION_URL,
        token_url=TOKEN_URL,
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        redirect_url=REDIRECT_URL,
    )


@pytest.fixture
def client_credentials_request() -> ClientCredentialsRequest:
    return ClientCredentialsRequest(
        authorization_url=AUTHORIZATION_URL,
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
    )


@pytest.fixture
def refresh_token_request() -> RefreshTokenRequest:
    return RefreshTokenRequest(
        token_url=TOKEN_URL,
        client_id=CLIENT_ID,
        client_secret=CLIENT_SECRET,
        refresh_token=REFRESH_TOKEN,
    )


@pytest.fixture
def load_error() -> LoadError:
    return LoadError(ConnectionError("page failed to load"))
