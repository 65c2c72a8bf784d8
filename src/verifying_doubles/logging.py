import logging
import os

LOG_LEVEL_ENV = "VERIFYING_DOUBLES_LOG_LEVEL"


def _is_cli(name: str) -> bool:
    return name.endswith('.cli')


def get_logger(name: str) -> logging.Logger:
    """
    Logger for a verifying_doubles module.

    The library is loaded into every pytest run through its plugin, so
    library loggers only get a NullHandler and leave output to the host's
    logging setup. The CLI logger writes to stderr.
    """
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger

    if _is_cli(name):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
        ))
        default_level = logging.INFO
    else:
        handler = logging.NullHandler()
        default_level = logging.WARNING
    logger.addHandler(handler)

    level_name = os.getenv(LOG_LEVEL_ENV, logging.getLevelName(default_level))
    try:
        level = getattr(logging, level_name.upper())
    except AttributeError:
        level = default_level

    logger.setLevel(level)
    return logger
