"""
Shared utilities for ResumeCrafter.

Common functionality used across contexts:
- Text-completion (LLM) access and response parsing
- Logging setup
- Timestamps
"""

from resumecrafter.utils.timestamp import format_timestamp, now_exact

__all__ = ["format_timestamp", "now_exact"]
