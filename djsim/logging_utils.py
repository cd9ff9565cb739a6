import logging
import sys

from .config import get_settings

ROOT_LOGGER = "djsim"


def configure_logging() -> logging.Logger:
    """Attach the ``djsim`` handler, with the level taken from settings.

    Runs once; after :func:`reset_logging` the next call reads the settings
    again.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    if logger.handlers:
        return logger  # already configured

    logger.setLevel(getattr(logging, get_settings().log_level, logging.WARNING))
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger


def reset_logging() -> None:
    """Drop the ``djsim`` handler and level so they are rebuilt on next use."""
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)


def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Return a logger under the ``djsim`` namespace."""
    configure_logging()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
