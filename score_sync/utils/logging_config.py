import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname).1s | %(name)-30.30s | %(message)s"

# Chatty at DEBUG/INFO; kept at WARNING unless the root level is stricter.
_NOISY_LOGGERS = ("urllib3", "uvicorn.access")


def setup_logging(level: int = logging.INFO, stream=None):
    """Route every logger to one stream handler on the root logger."""
    logger = logging.getLogger()
    logger.setLevel(level)

    for existing in list(logger.handlers):
        logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    return logger
