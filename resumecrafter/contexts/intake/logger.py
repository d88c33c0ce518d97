"""
Intake context logger.

Provides logging interface for the intake context with automatic [intake] prefix.
All intake modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from resumecrafter.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[intake]"


def setup_intake_logger(log_dir: Path = None, source: str = None) -> Path:
    """
    Setup logger for the intake context.

    Args:
        log_dir: Directory for this session's logs (default: LOGS_PATH)
        source: Optional input source for provenance (file path or "stdin")

    Returns:
        Path to log file
    """
    extra = {"Source": source} if source else None
    return _setup_logger(context_name="intake", log_dir=log_dir, extra_provenance=extra)


def _log_info(message: str) -> None:
    """Log info message with [intake] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [intake] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [intake] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [intake] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


def log_fragment_summary(source: str, fragment) -> None:
    """
    Log entry counts for a parsed resume fragment.

    Args:
        source: Parser that produced the fragment (e.g., "linkedin", "llm")
        fragment: ResumeFragment
    """
    skills = fragment.skills
    skill_count = (
        len(skills.technical) + len(skills.soft) + len(skills.languages) if skills else 0
    )
    _log_info(
        f"Parsed {source} data: {len(fragment.experience)} experience, "
        f"{len(fragment.education)} education, {skill_count} skills, "
        f"{len(fragment.certifications)} certifications"
    )
