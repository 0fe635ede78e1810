"""
Logging configuration for schemasniff.

The analysis engine (miner, scorer, fields, confidence, analyzer) never logs.
Only the layers around it do: the document provider, the exporter, the
SchemaSniffer orchestrator and the command-line script.
"""

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logger(
    name: str = "schemasniff",
    level: int = logging.INFO,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Configure the package logger.

    Args:
        name: Logger name (the package logger by default)
        level: Level for the logger and its handlers
        log_file: Also append records to this file

    Returns:
        The configured logger
    """
    package_logger = logging.getLogger(name)
    package_logger.setLevel(level)

    # Repeated calls only adjust the level (the CLI calls this once per run,
    # SchemaSniffer may call it again with an explicit log_level)
    if package_logger.handlers:
        for existing in package_logger.handlers:
            existing.setLevel(level)
        return package_logger

    # stderr: stdout carries the exported schema
    package_logger.addHandler(_handler(logging.StreamHandler(sys.stderr), level))
    if log_file:
        package_logger.addHandler(_handler(logging.FileHandler(log_file), level))

    return package_logger


def get_module_logger(module_name: str) -> logging.Logger:
    """Child logger, e.g. "schemasniff.provider"; inherits the package handlers."""
    return logging.getLogger(f"schemasniff.{module_name}")
