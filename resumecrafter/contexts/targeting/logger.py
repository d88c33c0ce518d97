"""
Targeting context logger.

Provides logging interface for the targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from resumecrafter.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Path = None, job_source: str = None) -> Path:
    """
    Setup logger for the targeting context.

    Args:
        log_dir: Directory for this tailoring session (default: LOGS_PATH)
        job_source: Optional job description file for provenance

    Returns:
        Path to log file
    """
    extra = {"Job Description": job_source} if job_source else None
    return _setup_logger(context_name="target", log_dir=log_dir, extra_provenance=extra)


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [target] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")
