"""
Centralized exception hierarchy for domain-specific errors.

This module provides custom exception classes that represent specific
error conditions in the application, enabling better error handling and
client-side error recovery.
"""


class RoadTripError(Exception):
    """Base exception for all application-specific errors."""

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(RoadTripError):
    """Exception raised when data validation fails."""


class ExternalServiceError(RoadTripError):
    """Exception raised when service calls fail."""


class RateLimitError(ExternalServiceError):
    """Exception raised when rate limits are exceeded."""


class ResourceNotFoundError(RoadTripError):
    """Exception raised when a requested resource is not found."""


class ServiceUnavailableError(RoadTripError):
    """Exception raised when an optional collaborator is not configured."""


class DeviceLocationError(RoadTripError):
    """Exception raised when the device position source reports an error."""


class DeviceLocationUnavailableError(DeviceLocationError):
    """Exception raised when location is denied or unsupported on the device."""


RoadTripException = RoadTripError
ValidationException = ValidationError
ExternalServiceException = ExternalServiceError
RateLimitException = RateLimitError
ResourceNotFoundException = ResourceNotFoundError
ServiceUnavailableException = ServiceUnavailableError
