"""
Logging configuration for the referral network packages.
"""
import logging
import sys
from typing import Optional, Sequence

PACKAGE_LOGGERS = ("referral_core", "referral_app")


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    packages: Sequence[str] = PACKAGE_LOGGERS,
) -> None:
    """
    Configure the package loggers.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to also write logs to (appended to)
        packages: Logger names to configure
    """
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    for name in packages:
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.propagate = False

        # Avoid duplicate output when called more than once
        if logger.hasHandlers():
            logger.handlers.clear()

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

        if log_file:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logging.getLogger(packages[0]).info("Logging initialized.")
