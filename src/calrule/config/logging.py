"""structlog configuration for calrule.

The library modules log through stdlib ``logging`` with %-style messages and
stay silent until this is called (the CLI calls it once per run). Records are
then rendered by structlog:
- Human (default): console lines
- JSON (--log-json): one JSON object per line

Output goes to stderr unless another stream is given, keeping stdout for
command results.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

import structlog


def configure_logging(
    *,
    verbose: bool = False,
    log_json: bool = False,
    stream: Optional[TextIO] = None,
) -> None:
    """Route stdlib and structlog records through one structlog formatter.

    Args:
        verbose: DEBUG for the ``calrule`` loggers (cache population, reclaimed
            stores, registrations, merge results). When False, only WARNING+.
        log_json: Use JSON renderer instead of console renderer.
        stream: Destination, stderr by default.
    """
    out = stream if stream is not None else sys.stderr

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_json:
        renderers: list[structlog.types.Processor] = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        isatty = getattr(out, "isatty", None)
        renderers = [structlog.dev.ConsoleRenderer(colors=bool(isatty and isatty()))]

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(out)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, *renderers],
        )
    )

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(logging.WARNING)

    logging.getLogger("calrule").setLevel(logging.DEBUG if verbose else logging.WARNING)
