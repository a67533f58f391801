"""Resolution of relative URIs against a configured base."""

from __future__ import annotations

import logging
from urllib.parse import urljoin, urlsplit

from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def validate_base_uri(base_uri: object) -> str | None:
    """Check a base URI once, at construction time.

    Returns the URI when rebasing should happen, or None when it should not
    (no base given, empty, or relative). Raises ConfigurationError for values
    that cannot be a URI at all.
    """
    if base_uri is None or base_uri == "":
        return None
    if not isinstance(base_uri, str):
        raise ConfigurationError("base_uri", base_uri, "expected a string")
    try:
        parts = urlsplit(base_uri)
    except ValueError as exc:
        raise ConfigurationError("base_uri", base_uri, str(exc)) from exc
    if not parts.scheme:
        logger.debug("Ignoring relative base URI %r; attributes will not be rebased", base_uri)
        return None
    return base_uri


def rebase(value: str, base_uri: str) -> str:
    """Resolve ``value`` against ``base_uri``, leaving it unchanged if that fails."""
    try:
        return urljoin(base_uri, value)
    except ValueError:
        logger.debug("Could not resolve %r against %r; keeping it as is", value, base_uri)
        return value
