"""Token endpoint response decoding.

A token endpoint answers with either a token response (RFC 6749 Section 5.1)
or an error response (Section 5.2). The body shape decides which one it is:
a JSON object with an ``access_token`` string is a success whatever the HTTP
status, anything else is decoded as an error and classified.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote_plus

from ..utils.errors import (
    AuthorizationDataInvalid,
    DecodeError,
    DecodeErrorKind,
    ErrorDataInvalid,
)
from .failures import AuthorizationFailure, UnexpectedServerResponse, classify_error
from .requests import parse_absolute_url

logger = logging.getLogger(__name__)


def _as_int(value: Any) -> int | None:
    """Return ``value`` as an int if it is an integral JSON number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _parse_int_string(value: Any) -> int | None:
    if not isinstance(value, str):
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _parse_expiry(data: Mapping[str, Any]) -> int | None:
    """Read the token lifetime from ``expires_in`` or ``expires``.

    A numeric value under either name wins over a numeric string.
    """
    fields = ("expires_in", "expires")
    for name in fields:
        value = _as_int(data.get(name))
        if value is not None:
            return value
    for name in fields:
        value = _parse_int_string(data.get(name))
        if value is not None:
            return value
    return None


def _optional_str(data: Mapping[str, Any], name: str) -> str | None:
    value = data.get(name)
    return value if isinstance(value, str) else None


@dataclass(frozen=True)
class AuthorizationData:
    """Credentials returned by the server for a successful authorization."""

    access_token: str
    refresh_token: str | None = None
    expires_in_seconds: int | None = None
    token_type: str | None = None
    scope: str | None = None

    @classmethod
    def decode(cls, json_value: Any) -> "AuthorizationData":
        """Decode a parsed JSON value into AuthorizationData.

        Args:
            json_value: Value returned by ``json.loads``

        Returns:
            Decoded AuthorizationData

        Raises:
            AuthorizationDataInvalid: If the value is not an object or has no access_token
        """
        if not isinstance(json_value, dict):
            raise AuthorizationDataInvalid(DecodeErrorKind.NOT_JSON_OBJECT)

        access_token = json_value.get("access_token")
        if not isinstance(access_token, str):
            raise AuthorizationDataInvalid(DecodeErrorKind.MISSING_ACCESS_TOKEN_FIELD)

        return cls(
            access_token=access_token,
            refresh_token=_optional_str(json_value, "refresh_token"),
            expires_in_seconds=_parse_expiry(json_value),
            token_type=_optional_str(json_value, "token_type"),
            scope=_optional_str(json_value, "scope"),
        )


@dataclass(frozen=True)
class ErrorData:
    """Wire-level OAuth error, before classification."""

    error: str
    error_description: str | None = None
    error_uri: str | None = None

    @classmethod
    def decode(cls, json_value: Any) -> "ErrorData":
        """Decode a parsed JSON error body.

        ``error_description`` is percent-decoded (``+`` becomes a space);
        ``error_uri`` is dropped unless it is an absolute URL.

        Raises:
            ErrorDataInvalid: If the value is not an object or has no error field
        """
        if not isinstance(json_value, dict):
            raise ErrorDataInvalid(DecodeErrorKind.NOT_JSON_OBJECT)

        error = json_value.get("error")
        if not isinstance(error, str):
            raise ErrorDataInvalid(DecodeErrorKind.MISSING_ERROR_FIELD)

        description = _optional_str(json_value, "error_description")
        if description is not None:
            description = unquote_plus(description)

        return cls(
            error=error,
            error_description=description,
            error_uri=_valid_uri(_optional_str(json_value, "error_uri")),
        )

    @classmethod
    def from_query(cls, params: Mapping[str, str]) -> "ErrorData":
        """Build ErrorData from redirect query parameters.

        Query values arrive already decoded, so they are not decoded again.

        Raises:
            ErrorDataInvalid: If there is no error parameter
        """
        error = params.get("error")
        if error is None:
            raise ErrorDataInvalid(DecodeErrorKind.MISSING_ERROR_FIELD)
        return cls(
            error=error,
            error_description=params.get("error_description"),
            error_uri=_valid_uri(params.get("error_uri")),
        )

    def as_authorization_failure(self) -> AuthorizationFailure:
        """Classify this error into its AuthorizationFailure."""
        return classify_error(self.error, self.error_description)


def _valid_uri(value: str | None) -> str | None:
    if value is None:
        return None
    return value if parse_absolute_url(value) is not None else None


@dataclass(frozen=True)
class Success:
    """Terminal result of a successful flow."""

    data: AuthorizationData

    @property
    def is_success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    """Terminal result of a failed flow."""

    failure: AuthorizationFailure

    @property
    def is_success(self) -> bool:
        return False


Response = Success | Failure


def parse_json_body(body: bytes) -> Any:
    """Decode a response body as UTF-8 JSON.

    Raises:
        DecodeError: NOT_UTF8 or MALFORMED_JSON; the underlying error is chained
    """
    try:
        text = body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(DecodeErrorKind.NOT_UTF8, str(e)) from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(DecodeErrorKind.MALFORMED_JSON, str(e)) from e


def decode_response(
    body: bytes | None,
    status_code: int,
    headers: Mapping[str, str] | None = None,
) -> Response:
    """Interpret a token endpoint response.

    Args:
        body: Raw response body (None is treated as empty)
        status_code: HTTP status code
        headers: Response headers, kept for diagnostics on failure

    Returns:
        Success if the body carries an access_token, otherwise a classified
        Failure. Bodies that are neither shape become UnexpectedServerResponse.
    """
    response_headers = dict(headers or {})

    try:
        json_value = parse_json_body(body or b"")
        if isinstance(json_value, dict) and isinstance(json_value.get("access_token"), str):
            return Success(AuthorizationData.decode(json_value))
        error_data = ErrorData.decode(json_value)
    except DecodeError as e:
        logger.warning(f"Could not decode token endpoint response (HTTP {status_code}): {e}")
        return Failure(
            UnexpectedServerResponse(status_code=status_code, headers=response_headers, cause=e)
        )

    logger.debug(f"Token endpoint returned error {error_data.error!r} (HTTP {status_code})")
    return Failure(error_data.as_authorization_failure())
