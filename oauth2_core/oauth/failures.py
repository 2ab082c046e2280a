"""Authorization failures and OAuth error-code classification.

Every unsuccessful flow ends in exactly one of the failure values defined
here. Two of them are structural (a redirect without the expected
parameters, or a server/transport response that could not be interpreted);
the rest mirror the error codes of RFC 6749 Sections 4.1.2.1 and 5.2.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar


class AuthorizationFailure:
    """Base class for the closed set of authorization failure values."""

    @property
    def message(self) -> str:
        """Human-readable summary of the failure."""
        return type(self).__name__


@dataclass(frozen=True)
class MissingParametersInRedirectionURI(AuthorizationFailure):
    """The redirect carried neither a ``code`` nor an ``error`` parameter."""

    @property
    def message(self) -> str:
        return "Redirection URI did not contain a code or error parameter"


@dataclass(frozen=True)
class UnexpectedServerResponse(AuthorizationFailure):
    """A response (or transport/load failure) that could not be interpreted.

    ``status_code`` is None when no HTTP response was received at all, e.g.
    a network error or an authorization page that failed to load.
    """

    status_code: int | None = None
    headers: Mapping[str, str] = field(default_factory=dict, hash=False)
    cause: BaseException | None = field(default=None, compare=False)

    @property
    def message(self) -> str:
        if self.status_code is None:
            return f"No usable response from server: {self.cause}"
        if self.cause is not None:
            return f"Unexpected server response (HTTP {self.status_code}): {self.cause}"
        return f"Unexpected server response (HTTP {self.status_code})"


@dataclass(frozen=True)
class OAuthFailure(AuthorizationFailure):
    """A protocol error reported by the authorization server."""

    error_code: ClassVar[str] = ""

    description: str | None = None

    @property
    def message(self) -> str:
        if self.description:
            return f"{self.error_code}: {self.description}"
        return self.error_code


@dataclass(frozen=True)
class OAuthInvalidRequest(OAuthFailure):
    error_code: ClassVar[str] = "invalid_request"


@dataclass(frozen=True)
class OAuthUnauthorizedClient(OAuthFailure):
    error_code: ClassVar[str] = "unauthorized_client"


@dataclass(frozen=True)
class OAuthAccessDenied(OAuthFailure):
    error_code: ClassVar[str] = "access_denied"


@dataclass(frozen=True)
class OAuthUnsupportedResponseType(OAuthFailure):
    error_code: ClassVar[str] = "unsupported_response_type"


@dataclass(frozen=True)
class OAuthUnsupportedGrantType(OAuthFailure):
    error_code: ClassVar[str] = "unsupported_grant_type"


@dataclass(frozen=True)
class OAuthInvalidScope(OAuthFailure):
    error_code: ClassVar[str] = "invalid_scope"


@dataclass(frozen=True)
class OAuthServerError(OAuthFailure):
    error_code: ClassVar[str] = "server_error"


@dataclass(frozen=True)
class OAuthTemporarilyUnavailable(OAuthFailure):
    error_code: ClassVar[str] = "temporarily_unavailable"


@dataclass(frozen=True)
class OAuthInvalidGrant(OAuthFailure):
    error_code: ClassVar[str] = "invalid_grant"


@dataclass(frozen=True)
class OAuthInvalidClient(OAuthFailure):
    error_code: ClassVar[str] = "invalid_client"


@dataclass(frozen=True)
class OAuthUnknownError(OAuthFailure):
    """The server sent an ``error`` value that is not defined by RFC 6749.

    ``description`` is synthesized to keep both the raw code and the raw
    description; the raw values stay available as ``code`` and
    ``error_description``.
    """

    code: str = ""
    error_description: str | None = None

    @classmethod
    def from_error(cls, code: str, error_description: str | None = None) -> "OAuthUnknownError":
        if error_description:
            description = f"Unknown error: {error_description} ({code})"
        else:
            description = f"Unknown error: ({code})"
        return cls(description=description, code=code, error_description=error_description)

    @property
    def message(self) -> str:
        return self.description or f"Unknown error: ({self.code})"


OAUTH_ERROR_CODES: dict[str, type[OAuthFailure]] = {
    cls.error_code: cls
    for cls in (
        OAuthInvalidRequest,
        OAuthUnauthorizedClient,
        OAuthAccessDenied,
        OAuthUnsupportedResponseType,
        OAuthUnsupportedGrantType,
        OAuthInvalidScope,
        OAuthServerError,
        OAuthTemporarilyUnavailable,
        OAuthInvalidGrant,
        OAuthInvalidClient,
    )
}


def classify_error(code: str, description: str | None = None) -> AuthorizationFailure:
    """Map an OAuth ``error`` code to its failure value.

    Matching is exact and case-sensitive. Codes outside RFC 6749 map to
    ``OAuthUnknownError`` rather than raising.

    Args:
        code: Value of the ``error`` field or query parameter
        description: Decoded ``error_description``, if any

    Returns:
        The matching AuthorizationFailure
    """
    failure_cls = OAUTH_ERROR_CODES.get(code)
    if failure_cls is None:
        return OAuthUnknownError.from_error(code, description)
    return failure_cls(description=description)
