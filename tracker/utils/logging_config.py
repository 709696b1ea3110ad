"""
Provides a function to configure application-wide logging.
"""

import logging
import sys
from typing import Union


def setup_logging(level: Union[int, str] = logging.INFO, log_to_file: bool = False,
                  log_filename: str = "crypto_tracker.log"):
    """
    Configures the root logger for the application.

    Args:
        level: The minimum logging level, as a number or a name such as "DEBUG".
        log_to_file: If True, logs will also be written to a file.
        log_filename: The name of the file to log to if log_to_file is True.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    log_format = "%(asctime)s.%(msecs)03d [%(levelname)-8s] [%(name)-20s] %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S"
    formatter = logging.Formatter(log_format, datefmt=date_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates if called multiple times
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Configure console handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))

    if log_to_file:
        try:
            file_handler = logging.FileHandler(log_filename, mode='a')
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)
            logging.info(f"Logging configured. Level: {logging.getLevelName(level)}. Output to console and file '{log_filename}'.")
        except OSError as e:
            logging.error(f"Failed to configure file logging to '{log_filename}': {e}", exc_info=True)
            logging.info(f"Logging configured. Level: {logging.getLevelName(level)}. Output to console only.")
    else:
        logging.info(f"Logging configured. Level: {logging.getLevelName(level)}. Output to console.")
