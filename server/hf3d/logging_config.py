# ─────────────────────────────────────────────────────────────────────────────
# Logging — structlog events and foreign stdlib records on one stdout stream
# ─────────────────────────────────────────────────────────────────────────────
# Gateway code logs through structlog; uvicorn, starlette and httpx log
# through stdlib. Both end up in the same ProcessorFormatter so every line
# carries the same keys (timestamp, level, logger, service, request_id).
# ─────────────────────────────────────────────────────────────────────────────


import logging
import sys
from collections.abc import Iterable

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "hf3d-gateway"

# httpx/httpcore log every outbound request with its full URL at INFO.
# uvicorn.access duplicates the middleware's request_completed event.
QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def _add_service(_: WrappedLogger, __: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    quiet_loggers: Iterable[str] = QUIET_LOGGERS,
) -> None:
    """Install a single stdout handler on the root logger.

    ``json_output`` selects JSON lines (tracebacks as structured dicts) over
    the coloured console renderer. Loggers named in ``quiet_loggers`` are
    raised to WARNING.
    """
    pre_chain: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        _add_service,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *pre_chain,
            structlog.processors.StackInfoRenderer(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )

    final: list[Processor] = [structlog.stdlib.ProcessorFormatter.remove_processors_meta]
    if json_output:
        final += [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
    else:
        final.append(structlog.dev.ConsoleRenderer())

    # foreign_pre_chain only runs for records that did not come from structlog.
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processors=final))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.getLevelName(log_level.upper()))

    for name in quiet_loggers:
        logging.getLogger(name).setLevel(logging.WARNING)
