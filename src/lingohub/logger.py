"""Logging configuration for the Lingohub SDK using loguru."""

import sys
from enum import Enum
from typing import Optional

from loguru import logger

# Store the configured file sink so repeated setup calls replace it
_file_sink_id: Optional[int] = None
_console_sink_id: Optional[int] = None


class LogLevel(str, Enum):
    """Log level for the Lingohub SDK."""

    NONE = "none"
    """No debug logging"""
    FULL = "full"
    """Full debug logging with all details"""


def setup_logger(
    log_level: LogLevel | str = LogLevel.NONE,
    log_file: Optional[str] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
    compression: str = "zip",
    console_output: bool = False,
) -> None:
    """
    Configure loguru output for the SDK.

    The SDK is a library, so its records are disabled unless the host asks
    for them with LogLevel.FULL.

    Args:
        log_level: LogLevel.NONE silences the SDK, LogLevel.FULL logs everything at DEBUG
        log_file: Optional path to a log file for SDK records
        rotation: Log rotation size
        retention: How long to keep old logs
        compression: Compression format for old logs
        console_output: Whether to output to stderr
    """
    global _file_sink_id, _console_sink_id

    level = LogLevel(log_level)

    if level is LogLevel.NONE:
        logger.disable("lingohub")
        return

    logger.enable("lingohub")

    # Console output with colors
    if console_output and _console_sink_id is None:
        _console_sink_id = logger.add(
            sys.stderr,
            level="DEBUG",
            format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
            colorize=True,
            filter=_sdk_records,
        )

    # File output
    if log_file is not None:
        if _file_sink_id is not None:
            logger.remove(_file_sink_id)
        _file_sink_id = logger.add(
            log_file,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]}:{function}:{line} - {message}",
            rotation=rotation,
            retention=retention,
            compression=compression,
            encoding="utf-8",
            filter=_sdk_records,
        )


def _sdk_records(record) -> bool:
    return record["name"] is not None and record["name"].startswith("lingohub")


def get_logger(name: Optional[str] = None):
    """
    Get a configured logger instance.

    Args:
        name: Optional name for the logger

    Returns:
        Logger instance
    """
    return logger.bind(name=name or "lingohub")


# Library default: silent until the host configures LogLevel.FULL
logger.disable("lingohub")
