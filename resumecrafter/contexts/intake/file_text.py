"""
Plain-text extraction from uploaded resume and profile files.

Supported formats:
- PDF (.pdf): pdfplumber page text, `(cid:N)` glyph artifacts removed
- Word (.docx): python-docx paragraph and table text
- Text (.txt, .md): read as UTF-8

The extracted text feeds either the deterministic LinkedIn parser or the
LLM extraction adapter.
"""

import re
from pathlib import Path
from typing import List

import pdfplumber
from docx import Document

from resumecrafter.contexts.intake.exceptions import UnsupportedFileFormatError
from resumecrafter.contexts.intake.logger import _log_debug, _log_warning

TEXT_EXTENSIONS = (".txt", ".md")
SUPPORTED_EXTENSIONS = (".pdf", ".docx") + TEXT_EXTENSIONS

_CID_ARTIFACT = re.compile(r"\(cid:\d+\)")


def extract_pdf_text(pdf_path: Path) -> str:
    """Extract text from every page of a PDF, joined by newlines."""
    with pdfplumber.open(pdf_path) as pdf:
        pages = [page.extract_text() or "" for page in pdf.pages]

    text = _CID_ARTIFACT.sub("", "\n".join(pages))
    if not text.strip():
        _log_warning(
            f"No text extracted from {pdf_path.name}. "
            "The PDF may be scanned images or have text extraction disabled."
        )
    return text


def extract_docx_text(docx_path: Path) -> str:
    """Extract paragraph text (and table rows) from a Word document."""
    doc = Document(str(docx_path))

    paragraphs: List[str] = [para.text.strip() for para in doc.paragraphs if para.text.strip()]

    # Tables are common in resumes
    for table in doc.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
            if cells:
                paragraphs.append(" ".join(cells))

    return "\n".join(paragraphs)


def extract_text_from_file(path: Path) -> str:
    """
    Extract plain text from a supported file.

    Args:
        path: Path to a .pdf, .docx, .txt or .md file

    Returns:
        Extracted text (may be empty for image-only PDFs)

    Raises:
        FileNotFoundError: If the file doesn't exist
        UnsupportedFileFormatError: If the extension is not supported
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    ext = path.suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise UnsupportedFileFormatError(ext)

    if ext == ".pdf":
        text = extract_pdf_text(path)
    elif ext == ".docx":
        text = extract_docx_text(path)
    else:
        text = path.read_text(encoding="utf-8")

    _log_debug(f"Extracted {len(text)} characters from {path.name}")
    return text
