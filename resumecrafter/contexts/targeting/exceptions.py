"""Custom exceptions for the targeting context."""

from resumecrafter.utils.llm import ResponseParseError

TAILORING_FAILURE_MESSAGE = "Failed to parse tailored resume. Please try again."


class TailoringError(ResponseParseError):
    """
    Exception raised when a tailoring response is not a resume JSON object.

    Attributes:
        message: User-facing error description
    """

    def __init__(self, message: str = TAILORING_FAILURE_MESSAGE):
        self.message = message
        super().__init__(message)


class JobFetchError(Exception):
    """
    Exception raised when a job posting URL cannot be turned into text.

    Attributes:
        url: The URL that was requested
        message: User-facing error description
    """

    def __init__(self, url: str, reason: str):
        self.url = url
        self.message = (
            "Could not fetch job description from URL. Please paste the text directly. "
            f"Error: {reason}"
        )
        super().__init__(self.message)
