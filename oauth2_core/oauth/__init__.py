"""OAuth 2.0 client core.

This package provides:
- Request models for the authorization code, client credentials and
  refresh token grants (RFC 6749)
- Token and error response decoding
- Classification of OAuth error codes into failure values
- A flow orchestrator with injectable HTTP and redirect capabilities
"""

from .failures import (
    OAUTH_ERROR_CODES,
    AuthorizationFailure,
    MissingParametersInRedirectionURI,
    OAuthAccessDenied,
    OAuthFailure,
    OAuthInvalidClient,
    OAuthInvalidGrant,
    OAuthInvalidRequest,
    OAuthInvalidScope,
    OAuthServerError,
    OAuthTemporarilyUnavailable,
    OAuthUnauthorizedClient,
    OAuthUnknownError,
    OAuthUnsupportedGrantType,
    OAuthUnsupportedResponseType,
    UnexpectedServerResponse,
    classify_error,
)
from .flow import Completion, FlowAttempt, FlowState, OAuth2Client, SingleShotCompletion
from .loopback import LoopbackRedirectReceiver
from .requests import (
    AuthorizationCodeRequest,
    ClientCredentialsRequest,
    GrantRequest,
    OAuthRequest,
    RefreshTokenRequest,
)
from .responses import (
    AuthorizationData,
    ErrorData,
    Failure,
    Response,
    Success,
    decode_response,
    parse_json_body,
)
from .transport import (
    HttpCapability,
    HttpxTransport,
    LoadError,
    Redirection,
    RedirectOutcome,
    RedirectPresenter,
)

__all__ = [
    # Requests
    "OAuthRequest",
    "AuthorizationCodeRequest",
    "ClientCredentialsRequest",
    "RefreshTokenRequest",
    "GrantRequest",
    # Responses
    "AuthorizationData",
    "ErrorData",
    "Response",
    "Success",
    "Failure",
    "decode_response",
    "parse_json_body",
    # Failures
    "AuthorizationFailure",
    "MissingParametersInRedirectionURI",
    "UnexpectedServerResponse",
    "OAuthFailure",
    "OAuthInvalidRequest",
    "OAuthUnauthorizedClient",
    "OAuthAccessDenied",
    "OAuthUnsupportedResponseType",
    "OAuthUnsupportedGrantType",
    "OAuthInvalidScope",
    "OAuthServerError",
    "OAuthTemporarilyUnavailable",
    "OAuthInvalidGrant",
    "OAuthInvalidClient",
    "OAuthUnknownError",
    "OAUTH_ERROR_CODES",
    "classify_error",
    # Capabilities
    "HttpCapability",
    "HttpxTransport",
    "RedirectPresenter",
    "RedirectOutcome",
    "Redirection",
    "LoadError",
    "LoopbackRedirectReceiver",
    # Flow
    "OAuth2Client",
    "FlowAttempt",
    "FlowState",
    "Completion",
    "SingleShotCompletion",
]
