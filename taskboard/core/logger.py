import inspect
import logging
import re
import sys

from loguru import logger

SENSITIVE_PATTERNS = re.compile(
    r"(password|token|secret|cookie|authorization)",
    re.IGNORECASE,
)

# Secret-bearing query parameters inside forwarded request lines
QUERY_SECRETS = re.compile(r"\b(token|password|secret)=[^&\s\"']+", re.IGNORECASE)

# Standard-library loggers whose records are forwarded to loguru
FORWARDED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi", "alembic")


def sanitize_value(key: str, value: object) -> object:
    """Redact sensitive values in log output."""
    if isinstance(key, str) and SENSITIVE_PATTERNS.search(key):
        return "***REDACTED***"
    if isinstance(value, dict):
        return {k: sanitize_value(k, v) for k, v in value.items()}
    if isinstance(value, list):
        return [sanitize_value("", item) for item in value]
    return value


class InterceptHandler(logging.Handler):
    """Route standard ``logging`` records (uvicorn, alembic) into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        message = QUERY_SECRETS.sub(r"\1=***REDACTED***", record.getMessage())
        logger.opt(depth=depth, exception=record.exc_info).log(level, message)


def setup_logger(debug: bool = False, *, log_file: str | None = "logs/app.log") -> None:
    """Configure loguru sinks and take over the server's standard loggers."""
    logger.remove()

    log_level = "DEBUG" if debug else "INFO"

    # Console output - colored
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
        colorize=True,
    )

    if log_file:
        # File output - structured, rotated
        logger.add(
            log_file,
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
            rotation="10 MB",
            retention="30 days",
            compression="gz",
            enqueue=True,  # Thread-safe
        )

    handler = InterceptHandler()
    for name in FORWARDED_LOGGERS:
        std_logger = logging.getLogger(name)
        std_logger.handlers = [handler]
        std_logger.setLevel(log_level)
        std_logger.propagate = False
