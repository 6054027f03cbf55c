class AppValidationError(ValueError):
    """Raised when user input or domain constraints are invalid."""


class UpstreamServiceError(RuntimeError):
    """Raised when the NDBC archive fails or returns an undecodable payload."""
