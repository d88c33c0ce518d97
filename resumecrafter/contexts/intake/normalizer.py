"""
Profile text normalizer for the Intake context.

Cleans text extracted from PDF/DOCX files before section segmentation.

Design principle: Normalize BEFORE parsing, so the segmentation heuristics
only ever see plain ASCII punctuation and single, trimmed lines.
"""

import unicodedata
from typing import List, Tuple

# Unicode replacements keyed by code point: problematic char -> ASCII equivalent.
# The middle dot (U+00B7) is kept: LinkedIn education dates depend on it.
UNICODE_REPLACEMENTS = {
    # Spaces
    0x00A0: " ",  # non-breaking space
    0x202F: " ",  # narrow no-break space
    # Zero-width characters -> remove
    0x200B: None,  # zero-width space
    0x200C: None,  # zero-width non-joiner
    0x200D: None,  # zero-width joiner
    0x2060: None,  # word joiner
    0xFEFF: None,  # BOM
    # Quotes
    0x2018: "'",  # left single quote
    0x2019: "'",  # right single quote
    0x201C: '"',  # left double quote
    0x201D: '"',  # right double quote
    # Dashes
    0x2013: "-",  # en dash
    0x2014: "-",  # em dash
    0x2212: "-",  # minus sign
}


def normalize_unicode(text: str) -> str:
    """
    Normalize unicode characters that cause parsing issues.

    Applies NFKC normalization and replaces common problematic characters
    with ASCII equivalents.

    Args:
        text: Raw text possibly containing problematic unicode

    Returns:
        Text with normalized unicode
    """
    text = unicodedata.normalize("NFKC", text)
    return text.translate(UNICODE_REPLACEMENTS)


def split_lines(text: str) -> List[str]:
    """Trimmed, non-empty lines of text."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def preprocess_profile_text(text: str) -> Tuple[List[str], str]:
    """
    Prepare extracted profile text for segmentation.

    This is the main entry point for profile text normalization.

    Args:
        text: Raw text from file-text extraction

    Returns:
        (lines, full) - trimmed non-empty lines, and the same lines joined by
        newlines for regex-based section search
    """
    lines = split_lines(normalize_unicode(text or ""))
    return lines, "\n".join(lines)
