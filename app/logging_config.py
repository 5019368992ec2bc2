"""
logging_config.py — Centralized Logging Configuration

Sets up Loguru as the single logging backend. Intercepts Python's stdlib
logging module so uvicorn, SQLAlchemy and the REST table store route
through Loguru with the same format as the matching and deal engine.

Business Rules:
- All logs go through Loguru (no direct print() or stdlib handlers)
- JSON lines in production (https APP_URL that is not localhost), colour
  text in development
- Lines carry the request id and the entity/reason diagnostics bound by the
  fallback policy, the normalizer and the entity books, when present

Called by: app/main.py (on startup)
Depends on: environment (LOG_LEVEL, APP_URL)
"""

import logging
import os
import sys

from loguru import logger

# Extras surfaced on every line when bound: request_id from the middleware,
# entity/reason from fallback loads, dropped rows and failed writes.
DIAGNOSTIC_FIELDS = ("request_id", "entity", "reason")

NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine")

DEV_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
)


def diagnostics(extra: dict) -> str:
    """'request_id=ab12cd34 entity=client reason=backend_error' for the bound fields."""
    return " ".join(f"{k}={extra[k]}" for k in DIAGNOSTIC_FIELDS if extra.get(k) not in (None, ""))


def _dev_format(record) -> str:
    # returned text is re-parsed as a template: braces in values must be doubled
    tags = diagnostics(record["extra"]).replace("{", "{{").replace("}", "}}")
    suffix = f" <magenta>[{tags}]</magenta>" if tags else ""
    return DEV_FORMAT + "{message}" + suffix + "\n{exception}"


def _json_format(record) -> str:
    tags = diagnostics(record["extra"]).replace("{", "{{").replace("}", "}}")
    return "{message}" + (f" [{tags}]" if tags else "")


def is_production(app_url: str) -> bool:
    return app_url.startswith("https://") and "localhost" not in app_url


def setup_logging() -> None:
    """Configure Loguru and intercept stdlib logging.

    Call once at app startup, before any other imports that log.
    """
    logger.remove()

    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    production = is_production(os.getenv("APP_URL", ""))

    if production:
        # JSON lines to stdout; the full extra dict is kept under record.extra
        logger.add(sys.stdout, level=log_level, format=_json_format, serialize=True)
    else:
        logger.add(sys.stdout, level=log_level, format=_dev_format, colorize=True)

    # Intercept stdlib logging → route through Loguru
    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    for noisy in NOISY_LOGGERS:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.info("Logging configured", level=log_level, production=production)


class _InterceptHandler(logging.Handler):
    """Route stdlib logging records to Loguru, tagged with the stdlib logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller (skip frames from stdlib logging internals)
        frame, depth = logging.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.bind(stdlib_logger=record.name).opt(
            depth=depth, exception=record.exc_info
        ).log(level, record.getMessage())
