"""Custom exceptions for the curation context."""

from typing import Optional


class ImportFormatError(ValueError):
    """
    Exception raised when a master resume JSON document cannot be imported.

    The existing record is left untouched when this is raised.
    """

    pass


class RecordShapeError(ValueError):
    """
    Exception raised when untrusted resume data does not match the schema shape.

    Attributes:
        message: Error description
        path: JSON-style location of the offending value (e.g., "$.experience[2].bullets")
    """

    def __init__(self, message: str, path: Optional[str] = None):
        self.message = message
        self.path = path

        if path:
            super().__init__(f"{message} at {path}")
        else:
            super().__init__(message)
