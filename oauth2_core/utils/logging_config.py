"""Logging setup for applications embedding the OAuth client.

Library modules only create loggers. ``setup_logging`` is called once by the
application and takes its level from ``Settings.log_level``
(``OAUTH2_LOG_LEVEL``) unless one is passed explicitly.
"""

import logging
from pathlib import Path

from ..core.config import Settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# httpx logs every request URL at INFO; token request URLs carry client credentials
_CREDENTIAL_BEARING_LOGGERS = ("httpx", "httpcore")


def setup_logging(
    name: str = "oauth2_core",
    level: str | None = None,
    log_file: Path | None = None,
    settings: Settings | None = None,
) -> logging.Logger:
    """Configure root logging for the OAuth client.

    Args:
        name: Logger name to return (typically __name__ from the calling module)
        level: Log level; overrides ``settings.log_level`` when given
        log_file: Optional file path for logging output
        settings: Client settings (default: loaded from OAUTH2_* environment variables)

    Returns:
        Configured logger instance

    Raises:
        ValueError: If ``level`` is not a known logging level
    """
    if level is None:
        level = (settings or Settings()).log_level
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers, force=True)

    # Request URLs are only worth the exposure when debugging
    library_level = logging.NOTSET if numeric_level <= logging.DEBUG else logging.WARNING
    for library in _CREDENTIAL_BEARING_LOGGERS:
        logging.getLogger(library).setLevel(library_level)

    return logging.getLogger(name)
