"""
Logging Utilities for the run report engine

Centralized logging configuration for the CLI plus helpers that record
exceptions with enough context to reproduce a failed render.
"""

import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the ROOT logger so every module logger inherits the handlers.

    Args:
        level: Console log level
        log_file: Optional path for a DEBUG-level file log

    Returns:
        The named ``run_report`` logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter('%(message)s'))
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, mode='w', encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
        )
        root_logger.addHandler(file_handler)

    run_logger = logging.getLogger('run_report')
    run_logger.setLevel(logging.DEBUG)
    run_logger.debug(f"Logging configured (console level {logging.getLevelName(level)})")
    if log_file:
        run_logger.debug(f"Log File: {log_file}")
    return run_logger


def log_exception(logger: logging.Logger, exc: Exception, context: str = "",
                  run_id: Optional[str] = None, **kwargs) -> None:
    """
    Log a full exception with traceback and context information.

    Args:
        logger: Logger instance to use
        exc: Exception that was raised
        context: Additional context string
        run_id: Run identifier, when known
        **kwargs: Additional context key-value pairs
    """
    error_msg = f"Exception occurred: {type(exc).__name__}: {str(exc)}"
    if context:
        error_msg = f"{context} - {error_msg}"

    logger.error(error_msg)
    logger.debug(f"Traceback:\n{traceback.format_exc()}")

    if run_id:
        logger.error(f"Run: {run_id}")

    if kwargs:
        logger.error(f"Context: {kwargs}")


def get_error_info(exc: Exception, context: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Extract structured error information from an exception.

    Args:
        exc: Exception that was raised
        context: Additional context dictionary

    Returns:
        Dictionary with error information
    """
    return {
        "error_type": type(exc).__name__,
        "error_message": str(exc),
        "traceback": traceback.format_exc(),
        "timestamp": datetime.now().isoformat(),
        "context": context or {}
    }
