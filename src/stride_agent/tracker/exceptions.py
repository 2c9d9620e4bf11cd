"""
Exceptions for tracker API communication.
"""


class TrackerError(Exception):
    """Base exception for tracker client errors."""
    pass


class TrackerConnectionError(TrackerError):
    """Exception raised when unable to connect to the tracker API."""
    pass


class TrackerServerError(TrackerError):
    """Exception raised when the tracker API returns an error status."""

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.status_code = status_code


class TrackerTimeoutError(TrackerError):
    """Exception raised when a tracker API request times out."""
    pass


class TrackerConfigurationError(TrackerError):
    """Exception raised when a request needs a mapping that is not configured."""
    pass
