import time
import logging
import config
import functools
import os
import datetime


def timer(func):
    """Makes ``func`` return ``(result, elapsed_seconds)``."""
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        elapsed_time = time.perf_counter() - start_time
        return result, elapsed_time
    return wrapper


_FORMATTER = logging.Formatter(
    "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


def setup_logger(name, save_file=False):
    """Create a logger with the specified name.

    With ``save_file`` the logger also writes to a dated file under
    ``config.LOG_PATH``; this can be requested after the logger exists.
    """
    logger = logging.getLogger(name)
    logger.setLevel(config.LOGGING_LEVEL)

    if not logger.handlers:
        ch = logging.StreamHandler()
        ch.setLevel(config.LOGGING_LEVEL)
        ch.setFormatter(_FORMATTER)
        logger.addHandler(ch)

    if save_file and not any(isinstance(h, logging.FileHandler) for h in logger.handlers):
        os.makedirs(config.LOG_PATH, exist_ok=True)
        log_file_path = os.path.join(config.LOG_PATH, f"{datetime.datetime.now().strftime('%Y-%m-%d')}.log")
        fh = logging.FileHandler(log_file_path)
        fh.setLevel(config.LOGGING_LEVEL)
        fh.setFormatter(_FORMATTER)
        logger.addHandler(fh)

    return logger


def set_logging_level(level: str):
    """Applies ``level`` to every logger already created through ``setup_logger``."""
    config.LOGGING_LEVEL = level.upper()
    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        if existing.handlers:
            existing.setLevel(config.LOGGING_LEVEL)
            for handler in existing.handlers:
                handler.setLevel(config.LOGGING_LEVEL)
