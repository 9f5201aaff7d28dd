"""Logging setup for the API process.

Everything ends up in loguru: the application logs through it directly and
stdlib loggers (uvicorn, SQLAlchemy, botocore) are forwarded by
``InterceptHandler``.
"""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.catalog.runtime.config.config_data import LoggingConfig
from src.catalog.runtime.context import get_config

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Third-party loggers and the minimum level that reaches the sinks
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "botocore": logging.WARNING,
    "boto3": logging.WARNING,
    "urllib3": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward stdlib logging records to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Replaced by the request logging middleware
        if record.name == "uvicorn.access":
            return
        # Already logged by the middleware together with the request context
        if record.name == "uvicorn.error" and record.levelno >= logging.ERROR:
            return

        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_file_sink(cfg: LoggingConfig, verbose_errors: bool) -> None:
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    as_json = cfg.format == "json"
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if as_json else PLAIN_FORMAT,
        serialize=as_json,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )


def _route_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = []
        stdlib_logger.propagate = True
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging() -> None:
    """Install loguru sinks from the ``logging`` config section."""
    config = get_config()
    cfg = config.logging
    # No variable dumps in production tracebacks
    verbose_errors = config.app.environment != "production"

    logger.remove()
    logger.configure(
        extra={"request_id": "-"},
        patcher=lambda record: record["extra"].setdefault("request_id", "-"),
    )
    logger.add(
        sys.stderr,
        level=cfg.level,
        format=PLAIN_FORMAT,
        colorize=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )
    if cfg.file:
        _add_file_sink(cfg, verbose_errors)

    _route_stdlib_logging()

    logger.bind(
        level=cfg.level, format=cfg.format, file=cfg.file, environment=config.app.environment
    ).info("Logging configured")
