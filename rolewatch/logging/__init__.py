"""Structured logging helpers.

Modules log through ``get_logger(__name__, component="...")`` and attach a
dotted ``event`` name plus any relevant fields via ``extra``; the handler set
up by ``configure_logging`` renders them as JSON or key=value pairs.
"""

import logging
from typing import Optional, Union


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges a default ``component`` into each call's extra."""

    def process(self, msg, kwargs):
        # Fields passed on the call win over the adapter defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger, optionally tagging every record with a component field.

    Args:
        name: Logger name (typically __name__)
        component: Component identifier injected into all records

    Returns:
        Logger or ComponentLoggerAdapter instance

    Example:
        >>> logger = get_logger(__name__, component="ingestion")
        >>> logger.info("Ingested company", extra={"event": "ingestion.company.completed"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger
