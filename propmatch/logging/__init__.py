"""Structured logging helpers.

Modules log through ``get_logger(__name__, component=...)`` and attach a
dotted ``event`` name in ``extra`` (``listing.created``,
``match.pass.completed``...). Formatting and context enrichment are set up
once by :func:`~propmatch.logging.config.configure_logging`.
"""

import logging
from typing import Optional, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges its component field with per-call extra.

    The per-call ``extra`` wins on key conflicts.
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger, optionally tagging every record with ``component``.

    Args:
        name: Logger name (typically __name__)
        component: Component identifier injected into all records

    Returns:
        Logger or ComponentLoggerAdapter instance

    Example:
        >>> logger = get_logger(__name__, component="catalog")
        >>> logger.info("Listing created", extra={"event": "listing.created"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
