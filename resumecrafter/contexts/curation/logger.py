"""
Curation context logger.

Provides logging interface for the curation context with automatic [curation] prefix.
All curation modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from resumecrafter.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[curation]"


def setup_curation_logger(log_dir: Path = None, operation: str = "curate") -> Path:
    """
    Setup logger for the curation context.

    Args:
        log_dir: Directory for this session's logs (default: LOGS_PATH)
        operation: Operation name for provenance (e.g., "import", "manage")

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="curation",
        log_dir=log_dir,
        extra_provenance={"Operation": operation},
    )


def _log_info(message: str) -> None:
    """Log info message with [curation] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [curation] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [curation] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [curation] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_merge_report(source: str, report) -> None:
    """
    Log what a merge changed.

    Args:
        source: Where the merged data came from (e.g., "linkedin", "text")
        report: MergeReport from merge_fragment()
    """
    if report.total_added or report.contact_fields_filled or report.summary_adopted:
        _log_success(f"Merged {source} data into master resume")
    else:
        _log_info(f"Merged {source} data into master resume (nothing new)")

    for line in report.describe():
        _log_debug(f"  {line}")
