import logging

import structlog


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    timestamper = structlog.processors.TimeStamper(fmt="iso")
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        timestamper,
        structlog.processors.add_log_level,
    ]
    if json_logs:
        renderers = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        # ConsoleRenderer formats exceptions itself.
        renderers = [structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level.upper())),
    )

    logging.basicConfig(level=level.upper())


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)
