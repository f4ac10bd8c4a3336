# app/logging_utils.py
# Role: Application-wide logging helpers.
#       Configures the root logger once and hands out module loggers.

import logging
from typing import Optional

_LOGGER_INITIALISED = False

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s"


def configure_root_logger(level: int | str = logging.INFO) -> None:
    """
    Attach a single stream handler to the root logger.

    Safe to call repeatedly: only the first call adds the handler, later
    calls just adjust the level.
    """
    global _LOGGER_INITIALISED

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    if _LOGGER_INITIALISED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name)
