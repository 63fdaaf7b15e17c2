# spindex/logging_config.py
import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
PACKAGE_LOGGER = 'spindex'


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None,
                  name: Optional[str] = PACKAGE_LOGGER) -> logging.Logger:
    """
    Attach a console handler, and optionally a file handler, to a logger.

    Library modules only create ``logging.getLogger(__name__)`` loggers;
    applications call this once to see their output. Calling it again
    replaces the handlers it installed before and leaves any other
    handlers alone.

    Args:
        level: Logging level (e.g., logging.INFO, logging.DEBUG).
        log_file: Optional path to a file for logging output.
        name: Logger to configure; the ``spindex`` package logger by
            default, None for the root logger.

    Returns:
        The configured logger.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    for handler in [h for h in logger.handlers if getattr(h, '_spindex', False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler._spindex = True
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    return logger


def get_logger(name: str, level: Optional[int] = None) -> logging.Logger:
    """
    Logger under the ``spindex`` namespace, so setup_logging() reaches it.

    ``get_logger('regrid')`` and ``get_logger('spindex.regrid')`` are the
    same logger. The level is left to the parent unless given.
    """
    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + '.'):
        name = f"{PACKAGE_LOGGER}.{name}"
    logger = logging.getLogger(name)
    if level is not None:
        logger.setLevel(level)
    return logger
