# logger.py

import logging

# Names handed out by get_logger; --verbose lowers all of them at once
PROJECT_LOGGERS = []


def get_logger(name="tz-coords-gen", level=logging.INFO):
    """
    Named logger for one stage of the generator (Row Parser, Emitter, ...).

    Each name gets a single stderr handler printing "LEVEL: message", so
    stage loggers can be requested at import time by every module without
    stacking duplicate handlers. The name is recorded for set_level().
    """
    logger = logging.getLogger(name)

    if not logger.handlers:
        logger.setLevel(level)
        ch = logging.StreamHandler()
        ch.setLevel(level)
        ch.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        logger.addHandler(ch)
        PROJECT_LOGGERS.append(name)

    return logger


def set_level(level):
    """Apply `level` to every stage logger and its handler."""
    for name in PROJECT_LOGGERS:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        for handler in logger.handlers:
            handler.setLevel(level)
