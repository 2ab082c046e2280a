"""Tests for the OAuth 2.0 request model."""

import base64
import dataclasses

import httpx
import pytest
from conftest import (
    AUTHORIZATION_URL,
    CLIENT_ID,
    CLIENT_SECRET,
    REDIRECT_URL,
    REFRESH_TOKEN,
    TOKEN_URL,
)

from oauth2_core.oauth.requests import (
    AuthorizationCodeRequest,
    ClientCredentialsRequest,
    RefreshTokenRequest,
    parse_absolute_url,
    render_request,
)
from oauth2_core.utils.errors import InvalidRequestURLError


def expected_basic_header() -> str:
    credentials = base64.b64encode(f"{CLIENT_ID}:{CLIENT_SECRET}".encode()).decode()
    return f"Basic {credentials}"


class TestParseAbsoluteUrl:
    """Tests for URL validation."""

    def test_accepts_http_url(self) -> None:
        url = parse_absolute_url("https://auth.example.com/token?x=1")
        assert url is not None
        assert url.host == "auth.example.com"

    @pytest.mark.parametrize("value", ["", "   ", "not a url", "/relative/path", "example.com"])
    def test_rejects_non_absolute(self, value: str) -> None:
        assert parse_absolute_url(value) is None

    def test_rejects_invalid_port(self) -> None:
        assert parse_absolute_url("http://example.com:notaport/") is None

    def test_custom_scheme_without_host(self) -> None:
        """Custom-scheme redirect URIs need no host when require_host is off."""
        assert parse_absolute_url("com.example.app:/oauth", require_host=False) is not None
        assert parse_absolute_url("com.example.app:/oauth") is None


class TestAuthorizationCodeRequest:
    """Tests for AuthorizationCodeRequest."""

    def test_urls(self, authorization_code_request: AuthorizationCodeRequest) -> None:
        assert authorization_code_request.authorization_url == AUTHORIZATION_URL
        assert authorization_code_request.token_url == TOKEN_URL
        assert authorization_code_request.headers == {}

    def test_authorization_parameters(
        self, authorization_code_request: AuthorizationCodeRequest
    ) -> None:
        assert authorization_code_request.parameters == {
            "response_type": "code",
            "client_id": CLIENT_ID,
            "redirect_uri": REDIRECT_URL,
        }

    def test_scope_and_state_passed_through(self) -> None:
        request = AuthorizationCodeRequest(
            authorization_url=AUTHORIZATION_URL,
            token_url=TOKEN_URL,
            client_id=CLIENT_ID,
            client_secret=CLIENT_SECRET,
            redirect_url=REDIRECT_URL,
            scope="read write",
            state="xyz",
        )
        assert request.parameters["scope"] == "read write"
        assert request.parameters["state"] == "xyz"

    def test_client_secret_not_sent_to_authorization_page(
        self, authorization_code_request: AuthorizationCodeRequest
    ) -> None:
        http_request = authorization_code_request.authorization_request()
        assert http_request.method == "GET"
        assert "client_secret" not in http_request.url.params
        assert http_request.url.params["response_type"] == "code"

    def test_token_exchange_parameters(
        self, authorization_code_request: AuthorizationCodeRequest
    ) -> None:
        assert authorization_code_request.token_exchange_parameters("abc123") == {
            "grant_type": "authorization_code",
            "code": "abc123",
            "redirect_uri": REDIRECT_URL,
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
        }

    def test_token_exchange_request_targets_token_url(
        self, authorization_code_request: AuthorizationCodeRequest
    ) -> None:
        http_request = authorization_code_request.token_exchange_request("abc123")
        assert http_request.method == "POST"
        assert http_request.url.copy_with(query=None) == httpx.URL(TOKEN_URL)
        assert http_request.url.params["code"] == "abc123"
        assert http_request.url.params["grant_type"] == "authorization_code"

    @pytest.mark.parametrize("field", ["authorization_url", "token_url"])
    def test_invalid_url_rejected(self, field: str) -> None:
        kwargs = {
            "authorization_url": AUTHORIZATION_URL,
            "token_url": TOKEN_URL,
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
            "redirect_url": REDIRECT_URL,
        }
        kwargs[field] = "not a url"
        with pytest.raises(InvalidRequestURLError) as exc_info:
            AuthorizationCodeRequest(**kwargs)
        assert exc_info.value.url == "not a url"

    def test_invalid_url_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            RefreshTokenRequest(
                token_url="",
                client_id=CLIENT_ID,
                client_secret=CLIENT_SECRET,
                refresh_token=REFRESH_TOKEN,
            )

    def test_immutable(self, authorization_code_request: AuthorizationCodeRequest) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            authorization_code_request.client_id = "other"  # type: ignore[misc]


class TestClientCredentialsRequest:
    """Tests for ClientCredentialsRequest credential transmission modes."""

    def test_token_url_is_none(self, client_credentials_request: ClientCredentialsRequest) -> None:
        assert client_credentials_request.authorization_url == AUTHORIZATION_URL
        assert client_credentials_request.token_url is None

    def test_header_mode(self, client_credentials_request: ClientCredentialsRequest) -> None:
        assert client_credentials_request.headers == {"Authorization": expected_basic_header()}
        assert client_credentials_request.parameters == {"grant_type": "client_credentials"}

    def test_header_mode_rendered(
        self, client_credentials_request: ClientCredentialsRequest
    ) -> None:
        http_request = client_credentials_request.to_http_request(AUTHORIZATION_URL)
        assert http_request.headers["Authorization"] == expected_basic_header()
        assert http_request.url.params["grant_type"] == "client_credentials"
        assert "client_id" not in http_request.url.params
        assert "client_secret" not in http_request.url.params

    def test_parameter_mode(self) -> None:
        request = ClientCredentialsRequest(
            authorization_url=AUTHORIZATION_URL,
            client_id=CLIENT_ID,
            client_secret=CLIENT_SECRET,
            use_authorization_header=False,
        )
        assert request.headers == {}
        assert request.parameters == {
            "grant_type": "client_credentials",
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
        }

        http_request = request.to_http_request(AUTHORIZATION_URL)
        assert "Authorization" not in http_request.headers
        assert http_request.url.params["client_id"] == CLIENT_ID
        assert http_request.url.params["client_secret"] == CLIENT_SECRET

    def test_extra_parameters_cannot_override_grant_type(self) -> None:
        request = ClientCredentialsRequest(
            authorization_url=AUTHORIZATION_URL,
            client_id=CLIENT_ID,
            client_secret=CLIENT_SECRET,
            extra_parameters={"grant_type": "password", "audience": "api"},
        )
        assert request.parameters["grant_type"] == "client_credentials"
        assert request.parameters["audience"] == "api"

    def test_invalid_url_rejected(self) -> None:
        with pytest.raises(InvalidRequestURLError):
            ClientCredentialsRequest(
                authorization_url="::::", client_id=CLIENT_ID, client_secret=CLIENT_SECRET
            )


class TestRefreshTokenRequest:
    """Tests for RefreshTokenRequest."""

    def test_parameters(self, refresh_token_request: RefreshTokenRequest) -> None:
        assert refresh_token_request.authorization_url is None
        assert refresh_token_request.token_url == TOKEN_URL
        assert refresh_token_request.headers == {}
        assert refresh_token_request.parameters == {
            "grant_type": "refresh_token",
            "refresh_token": REFRESH_TOKEN,
            "client_id": CLIENT_ID,
            "client_secret": CLIENT_SECRET,
        }

    def test_scope(self) -> None:
        request = RefreshTokenRequest(
            token_url=TOKEN_URL,
            client_id=CLIENT_ID,
            client_secret=CLIENT_SECRET,
            refresh_token=REFRESH_TOKEN,
            scope="read",
        )
        assert request.parameters["scope"] == "read"


class TestRenderRequest:
    """Tests for rendering requests against a target URL."""

    def test_parameters_appended_to_existing_query(self) -> None:
        http_request = render_request(
            "https://auth.example.com/token?tenant=acme&grant_type=keep",
            {"grant_type": "refresh_token"},
            {},
        )
        items = http_request.url.params.multi_items()
        assert ("tenant", "acme") in items
        assert ("grant_type", "keep") in items
        assert ("grant_type", "refresh_token") in items
        assert items.index(("tenant", "acme")) < items.index(("grant_type", "refresh_token"))

    def test_request_headers_overwrite_extra_headers(self) -> None:
        http_request = render_request(
            TOKEN_URL,
            {},
            {"Authorization": "Basic new"},
            extra_headers={"authorization": "Basic old", "X-Trace": "1"},
        )
        assert http_request.headers.get_list("Authorization") == ["Basic new"]
        assert http_request.headers["X-Trace"] == "1"

    def test_default_accept_header(self) -> None:
        http_request = render_request(TOKEN_URL, {}, {})
        assert http_request.headers["Accept"] == "application/json"

    def test_method(self) -> None:
        assert render_request(TOKEN_URL, {}, {}).method == "POST"
        assert render_request(TOKEN_URL, {}, {}, method="GET").method == "GET"

    def test_no_parameters_no_trailing_question_mark(self) -> None:
        http_request = render_request(TOKEN_URL, {}, {})
        assert str(http_request.url) == TOKEN_URL

    def test_invalid_target(self) -> None:
        with pytest.raises(InvalidRequestURLError):
            render_request("not a url", {}, {})

    def test_to_http_request_uses_given_url(
        self, refresh_token_request: RefreshTokenRequest
    ) -> None:
        http_request = refresh_token_request.to_http_request("https://other.example.com/t")
        assert http_request.url.host == "other.example.com"
        assert http_request.url.params["refresh_token"] == REFRESH_TOKEN
