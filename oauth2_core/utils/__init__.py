"""Utility functions and classes."""

from .errors import (
    AuthorizationDataInvalid,
    CompletionAlreadyInvokedError,
    ConfigurationError,
    DecodeError,
    DecodeErrorKind,
    ErrorDataInvalid,
    FlowAlreadyCompletedError,
    InvalidRequestURLError,
    OAuth2Error,
    PresenterNotConfiguredError,
    TransportError,
)
from .logging_config import setup_logging

__all__ = [
    "OAuth2Error",
    "ConfigurationError",
    "PresenterNotConfiguredError",
    "InvalidRequestURLError",
    "DecodeError",
    "DecodeErrorKind",
    "AuthorizationDataInvalid",
    "ErrorDataInvalid",
    "TransportError",
    "CompletionAlreadyInvokedError",
    "FlowAlreadyCompletedError",
    "setup_logging",
]
