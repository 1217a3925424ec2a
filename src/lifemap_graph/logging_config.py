"""Logging setup for the lifemap_graph package."""

from __future__ import annotations

import logging
import sys


def setup_logging(level: int = logging.WARNING, log_file: str | None = None) -> None:
    """Configure the 'lifemap_graph' logger.

    Library code only creates module loggers; handlers are attached here,
    by the CLI or by a host application that wants console output.
    """
    logger = logging.getLogger("lifemap_graph")
    logger.setLevel(level)

    # Avoid duplicate output when called more than once
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
