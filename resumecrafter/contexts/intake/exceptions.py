"""Custom exceptions for the intake context."""

from resumecrafter.utils.llm import ResponseParseError

PARSE_FAILURE_MESSAGE = "Failed to parse AI response. Please try again."


class ExtractionParseError(ResponseParseError):
    """
    Exception raised when an extraction response is not usable resume data.

    Nothing from the failed response is applied to the master resume.

    Attributes:
        operation: Name of the extraction operation that failed (e.g., "parse_text_to_resume")
        message: User-facing error description
    """

    def __init__(self, operation: str, message: str = PARSE_FAILURE_MESSAGE):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation}: {message}")


class UnsupportedFileFormatError(ValueError):
    """
    Exception raised when text cannot be extracted from a file type.

    Attributes:
        extension: The rejected file extension (e.g., ".rtf")
    """

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(
            f"Unsupported file format: {extension or '(none)'}. Please upload a PDF, DOCX, or TXT file."
        )
