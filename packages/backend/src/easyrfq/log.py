"""structlog setup.

Learn: Modules just call structlog.get_logger(). This configures the
processor chain once at startup: merge contextvars (request_id, user_id
bound by the middleware), add level + timestamp, then render as JSON in
production or as pretty console output in development.
"""

import logging

import structlog


def configure_logging(environment: str = "development", debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO

    if environment == "development":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
