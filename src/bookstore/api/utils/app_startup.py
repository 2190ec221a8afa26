import logging
import sys
from pathlib import Path

from loguru import logger

from src.bookstore.runtime.config.config_data import ConfigData, LoggingConfig
from src.bookstore.runtime.context import get_config

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<magenta>{extra[service]}</magenta> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Loggers forwarded at a reduced level; the request middleware logs access itself
QUIET_LOGGERS = {
    "pymongo": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward standard library log records into loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == "uvicorn.access":
            return
        # uvicorn re-reports exceptions already logged by the middleware
        if record.name == "uvicorn.error" and record.levelno >= logging.ERROR:
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_file_sink(cfg: LoggingConfig, verbose_errors: bool) -> None:
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    serialize = cfg.format == "json"
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if serialize else PLAIN_FORMAT,
        serialize=serialize,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose_errors,
        diagnose=verbose_errors,
    )


def configure_logging(service: str = "-", config: ConfigData | None = None):
    """Route all logging of this process through loguru.

    Every record carries the service name and a request id (``-`` outside a
    request). Console output goes to stderr; a file sink is added when
    ``logging.file`` is configured.
    """
    config = config or get_config()
    cfg = config.logging
    verbose_errors = config.app.debug

    logger.remove()
    logger.configure(extra={"request_id": "-", "service": service})

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

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = []
        stdlib_logger.propagate = True
    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    logger.bind(
        app_level=cfg.level, app_format=cfg.format, app_file=cfg.file
    ).info("Logging configured for {} in {}", service, config.app.environment)
