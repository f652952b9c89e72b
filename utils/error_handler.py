"""Custom exception classes for the application."""

class BaseReportException(Exception):
    """Base exception for all application-specific errors."""
    pass

class ConfigError(BaseReportException):
    """Error related to configuration loading or values."""
    pass

class AuthenticationError(BaseReportException):
    """Error during Google authentication (service account or OAuth flow)."""
    pass

class APIError(BaseReportException):
    """Error interacting with an external API (Firestore, Gemini)."""
    def __init__(self, message: str, status_code: int | None = None, service: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.service = service

    def __str__(self) -> str:
        base = super().__str__()
        details = []
        if self.service:
            details.append(f"Service: {self.service}")
        if self.status_code:
            details.append(f"Status Code: {self.status_code}")
        if details:
            return f"{base} ({', '.join(details)})"
        return base

class DataSourceError(BaseReportException):
    """Error reading or decoding the raw mark, class, subject or exam collections."""
    pass

class InvalidScore(BaseReportException, ValueError):
    """A score is non-numeric, NaN, infinite, or missing where a number is required."""
    def __init__(self, message: str, value: object = None, student: str | None = None):
        super().__init__(message)
        self.value = value
        self.student = student

class SummaryGenerationError(BaseReportException):
    """Error while generating the AI-written marks summary."""
    pass

class UserCancelledError(BaseReportException):
    """Error raised when the user cancels an operation."""
    pass
