"""
Package logger for the pose angle pipeline

Modules get children of the "poseangle" logger via get_logger(__name__).
"""

import sys
import logging

LOGGER_NAME = "poseangle"

logger = logging.getLogger(LOGGER_NAME)
logger.setLevel(logging.INFO)

# Avoid duplicate handlers on re-import
if not logger.handlers:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(logging.DEBUG)

    formatter = logging.Formatter(
        '[%(asctime)s] [%(levelname)s] %(message)s',
        datefmt='%H:%M:%S'
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return a child of the package logger for a module name"""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logger.getChild(name)


def set_verbose(verbose: bool) -> None:
    """Switch the package logger between DEBUG and INFO"""
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
