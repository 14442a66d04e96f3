"""
Booking service exceptions
Raised by the service layer and mapped to HTTP responses by the API
"""


class BookingServiceError(Exception):
    """Base exception for booking core errors"""
    pass


class NotFoundError(BookingServiceError):
    """Referenced booking or notification does not exist"""
    pass


class ValidationError(BookingServiceError):
    """Input is missing required fields or carries invalid values"""

    def __init__(self, message="Validation failed", errors=None):
        super().__init__(message)
        self.message = message
        self.errors = errors or {}


class StoreError(BookingServiceError):
    """Blob store write failed"""
    pass
