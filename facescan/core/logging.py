"""Logging configuration for the face scanning service."""
import logging
import sys
import uuid
from contextlib import contextmanager
from typing import Iterator, List, Optional, TextIO

import structlog
from structlog.stdlib import ProcessorFormatter

from facescan.core.config import settings


def setup_logging(stream: TextIO = sys.stdout, level: Optional[str] = None) -> None:
    """Configure structured logging for the application.

    - Uses ConsoleRenderer with colors for development.
    - Uses JSONRenderer for other environments (staging, production).
    - Integrates with standard Python logging handlers.

    Args:
        stream: Where log lines go; command line tools pass stderr to keep stdout for results
        level: Log level name, ``settings.LOG_LEVEL`` if omitted
    """
    shared_processors: List[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]

    structlog.configure(
        processors=shared_processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    if settings.ENVIRONMENT == "development":
        final_processor = structlog.dev.ConsoleRenderer(colors=stream.isatty())
    else:
        final_processor = structlog.processors.JSONRenderer()
        shared_processors.insert(-1, structlog.processors.format_exc_info)

    handler = logging.StreamHandler(stream)
    handler.setFormatter(ProcessorFormatter(processor=final_processor))

    root_logger = logging.getLogger()
    if root_logger.hasHandlers():
        root_logger.handlers.clear()
    root_logger.addHandler(handler)

    level_name = (level or settings.LOG_LEVEL).upper()
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))

    logging.getLogger("uvicorn.error").propagate = False
    logging.getLogger("uvicorn.access").disabled = True

    root_logger.info(
        f"Logging setup complete. Environment: {settings.ENVIRONMENT}, Level: {level_name}"
    )


@contextmanager
def scan_context(scan_id: Optional[str] = None) -> Iterator[str]:
    """Tag every log line emitted during one batch scan with a ``scan_id``.

    Tasks created inside the block inherit the tag, so per-image worker logs
    can be grouped by batch.
    """
    scan_id = scan_id or uuid.uuid4().hex[:12]
    with structlog.contextvars.bound_contextvars(scan_id=scan_id):
        yield scan_id


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a logger instance compatible with standard logging.

    Args:
        name: Name for the logger, typically __name__

    Returns:
        structlog.stdlib.BoundLogger: Configured logger instance
    """
    return structlog.get_logger(name)
