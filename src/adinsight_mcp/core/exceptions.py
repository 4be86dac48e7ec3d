"""Custom exceptions for AdInsight."""


class AdInsightError(Exception):
    """Base exception for all AdInsight errors."""

    pass


class ConfigurationError(AdInsightError):
    """Raised when configuration is invalid."""

    pass


class ValidationError(AdInsightError):
    """Raised when a request or its data fails validation."""

    pass


class ExternalServiceError(AdInsightError):
    """Raised when a call to an external collaborator fails."""

    def __init__(self, message: str, service: str = "gemini"):
        """Initialize external service error.

        Args:
            message: Error message
            service: Name of the external service that failed
        """
        super().__init__(message)
        self.service = service


class DocumentExtractionError(ExternalServiceError):
    """Raised when campaign records cannot be extracted from a document."""

    def __init__(self, message: str, document_size: int | None = None):
        """Initialize document extraction error.

        Args:
            message: Error message
            document_size: Size in bytes of the document that failed (if known)
        """
        super().__init__(message)
        self.document_size = document_size


class SummaryGenerationError(ExternalServiceError):
    """Raised when an executive summary cannot be generated."""

    pass


class OperationInProgressError(AdInsightError):
    """Raised when a report operation starts while another one is running."""

    def __init__(self, operation: str):
        """Initialize operation-in-progress error.

        Args:
            operation: Name of the operation currently running
        """
        super().__init__(
            f"Another report operation is still running: {operation}. "
            "Wait for it to finish before starting a new one."
        )
        self.operation = operation
