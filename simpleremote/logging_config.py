import logging
import os
import sys
from logging.handlers import RotatingFileHandler

from . import config


def setup_logging() -> logging.Logger:
    """Set up logging."""
    logger = logging.getLogger("simpleremote")
    logger.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)

    if not config.LOG_ENABLED:
        logger.handlers.clear()
        logger.addHandler(logging.NullHandler())
        logger.propagate = False
        for name in ("urllib3", "urllib3.connectionpool"):
            logging.getLogger(name).setLevel(logging.WARNING)
        return logger

    if logger.handlers and not all(isinstance(h, logging.NullHandler) for h in logger.handlers):
        return logger
    logger.handlers.clear()
    logger.propagate = False

    fmt = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")

    os.makedirs(os.path.dirname(config.LOG_FILE) or ".", exist_ok=True)
    file_handler = RotatingFileHandler(config.LOG_FILE, maxBytes=2_000_000, backupCount=3, encoding="utf-8")
    file_handler.setFormatter(fmt)
    file_handler.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
    logger.addHandler(file_handler)

    console = None
    if config.CONSOLE_LOG:
        console = logging.StreamHandler(sys.stdout)
        console.setFormatter(fmt)
        console.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
        logger.addHandler(console)

    # requests logs connection attempts through urllib3.
    for name in ("urllib3", "urllib3.connectionpool"):
        ul = logging.getLogger(name)
        ul.handlers.clear()
        ul.propagate = False
        ul.setLevel(logging.DEBUG if config.DEBUG else logging.WARNING)
        ul.addHandler(file_handler)
        if console is not None:
            ul.addHandler(console)

    return logger


log = setup_logging()


def reload_logging() -> logging.Logger:
    """Reload logger level and handlers from current configuration."""
    logger = logging.getLogger("simpleremote")
    for h in list(logger.handlers):
        try:
            h.close()
        except Exception:
            pass
    logger.handlers.clear()
    logger.propagate = True

    for name in ("urllib3", "urllib3.connectionpool"):
        ul = logging.getLogger(name)
        ul.handlers.clear()
        ul.propagate = True

    return setup_logging()
