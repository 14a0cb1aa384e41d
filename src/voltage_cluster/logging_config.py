"""structlog + stdlib logging setup for the clustering tools.

Routes ``structlog.get_logger()`` events and plain ``logging`` records
through one formatter so library code and the CLI share a single
output stream: JSON lines by default, coloured console output when
``json_output`` is off.
"""

import logging
import sys
from typing import TextIO

import structlog


def configure_logging(
    json_output: bool = True, log_level: str = "INFO", stream: TextIO | None = None
) -> None:
    """Configure structlog and the stdlib root logger.

    Args:
        json_output: Render JSON lines when ``True``; otherwise use
            structlog's console renderer.
        log_level: Root log level name, e.g. ``"DEBUG"`` or ``"WARNING"``.
        stream: Where rendered lines go; ``sys.stderr`` when omitted.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=shared_processors
        + [
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    # stdout is reserved for the CLI's JSON output
    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper()))
