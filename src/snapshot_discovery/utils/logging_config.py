"""
Centralized logging configuration for snapshot-discovery.

Every module logs through loguru. Entry points (the CLI scripts and the API
server) call ``setup_logging`` once; library code only binds component names.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger


def setup_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    project_name: str = "snapshot-discovery",
) -> None:
    """
    Set up centralized logging for the project.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path. When omitted only stderr is used
        project_name: Project name, used in the startup message
    """
    # Remove default handler
    logger.remove()

    # Console handler with colored output
    logger.add(
        sys.stderr,
        level=log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
        "<level>{message}</level>",
        colorize=True,
    )

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        logger.add(
            str(log_file),
            level=log_level,
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]}:{function}:{line} - {message}",
            rotation="100 MB",  # Rotate when file reaches 100MB
            retention="30 days",  # Keep logs for 30 days
            compression="zip",  # Compress old logs
            catch=True,
        )

    get_logger(project_name).info(
        f"Logging configured - Level: {log_level}, File: {log_file or 'stderr only'}"
    )


def get_logger(component: str):
    """
    Get a logger bound to a component name.

    Args:
        component: Short component name, e.g. "cdx_client"

    Returns:
        Bound loguru logger
    """
    return logger.bind(component=component)


# Records logged before setup_logging() runs still carry a component field
logger.configure(extra={"component": "snapshot_discovery"})
