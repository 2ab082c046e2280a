"""Error types for the OAuth 2.0 client core.

Expected OAuth failures (``invalid_grant``, ``access_denied``...) are never
raised; they are delivered as ``Failure`` values. The exceptions here cover
programmer errors and the local decode/transport errors that the flow
orchestrator wraps before they reach the caller.
"""

from enum import Enum


class OAuth2Error(Exception):
    """Base exception for OAuth 2.0 client errors."""

    pass


# Configuration errors
class ConfigurationError(OAuth2Error):
    """Raised when the client is missing a capability or setting."""

    pass


class PresenterNotConfiguredError(ConfigurationError):
    """Raised when an interactive grant is run without a redirect presenter."""

    def __init__(self):
        super().__init__(
            "Authorization code requests need a redirect presenter. "
            "Pass presenter= when creating the client"
        )


class InvalidRequestURLError(OAuth2Error, ValueError):
    """Raised when a request is constructed with a URL that does not parse."""

    def __init__(self, field: str, url: str):
        super().__init__(f"Invalid {field}: {url!r}")
        self.field = field
        self.url = url


# Decode errors
class DecodeErrorKind(Enum):
    """Structural reasons a response body could not be decoded."""

    NOT_UTF8 = "not_utf8"
    MALFORMED_JSON = "malformed_json"
    NOT_JSON_OBJECT = "not_json_object"
    MISSING_ACCESS_TOKEN_FIELD = "missing_access_token_field"
    MISSING_ERROR_FIELD = "missing_error_field"


class DecodeError(OAuth2Error):
    """Raised when a server payload cannot be decoded."""

    def __init__(self, kind: DecodeErrorKind, detail: str | None = None):
        message = f"{kind.value}: {detail}" if detail else kind.value
        super().__init__(message)
        self.kind = kind
        self.detail = detail


class AuthorizationDataInvalid(DecodeError):
    """The payload is not a valid token response."""

    pass


class ErrorDataInvalid(DecodeError):
    """The payload is not a valid OAuth error response."""

    pass


class TransportError(OAuth2Error):
    """Raised by HTTP capabilities that do not use httpx to report a network failure."""

    pass


# Single-shot guards
class CompletionAlreadyInvokedError(OAuth2Error):
    """Raised when a completion handler is invoked more than once."""

    def __init__(self):
        super().__init__("Completion handler has already been invoked")


class FlowAlreadyCompletedError(OAuth2Error):
    """Raised when a flow attempt is run again after reaching a terminal state."""

    def __init__(self):
        super().__init__("Flow attempt already completed. Create a new attempt per exchange")
