"""
src/logger.py
"""


import logging
import os
import sys
from pathlib import Path
from typing import Optional


def setup_logger(
        name: str = "",
        level: Optional[str] = None,
        log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Set up logging for the agent.

    Args:
        name: Logger name; the default "" configures the root logger so every
              module's logging.getLogger(__name__) inherits it.
        level: Log level (DEBUG, INFO, WARNING, ERROR); defaults to LOG_LEVEL or INFO.
        log_file: Optional log file path; defaults to LOG_FILE.

    Returns:
        Configured logger instance
    """

    log_level = level or os.getenv("LOG_LEVEL", "INFO")
    log_file_path = log_file or os.getenv("LOG_FILE")

    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, log_level.upper()))
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file_path:
        log_path = Path(log_file_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
