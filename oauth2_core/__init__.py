"""oauth2-core - OAuth 2.0 client requests, flows and response decoding."""

__version__ = "0.1.0"

from .core.config import Settings
from .oauth import (
    AuthorizationCodeRequest,
    AuthorizationData,
    AuthorizationFailure,
    ClientCredentialsRequest,
    Failure,
    HttpxTransport,
    LoadError,
    LoopbackRedirectReceiver,
    OAuth2Client,
    Redirection,
    RefreshTokenRequest,
    Response,
    Success,
)
from .utils.errors import InvalidRequestURLError, OAuth2Error
from .utils.logging_config import setup_logging

__all__ = [
    "OAuth2Client",
    "Settings",
    "AuthorizationCodeRequest",
    "ClientCredentialsRequest",
    "RefreshTokenRequest",
    "Response",
    "Success",
    "Failure",
    "AuthorizationData",
    "AuthorizationFailure",
    "HttpxTransport",
    "LoopbackRedirectReceiver",
    "Redirection",
    "LoadError",
    # Errors
    "OAuth2Error",
    "InvalidRequestURLError",
    # Logging
    "setup_logging",
]
