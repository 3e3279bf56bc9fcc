"""
Custom exception hierarchy for the Interprep application.
"""

from typing import Dict, Any

class InterprepException(Exception):
    """Base exception for Interprep application."""
    def __init__(self, message: str, context: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

class AIServiceError(InterprepException):
    """Base exception for AI provider errors."""
    pass

class ServiceUnavailableError(AIServiceError):
    """Raised when a provider is not configured or cannot be reached."""
    pass

class InvalidResponseError(AIServiceError):
    """Raised when AI response cannot be parsed."""
    pass

class ConfigurationError(InterprepException):
    """Raised when there are configuration issues."""
    pass

class UnknownProviderError(ConfigurationError):
    """Raised when a caller asks for a provider that is not registered."""
    pass

class ResourceNotFoundError(InterprepException):
    """Raised when a record does not exist for the caller."""
    pass

class OwnershipError(InterprepException):
    """Raised when a record belongs to a different owner."""
    pass

class SessionStateError(InterprepException):
    """Raised when an interview session is not in a state that allows the operation."""
    pass

class UploadValidationError(InterprepException):
    """Raised when an uploaded file fails type or size checks."""
    pass

class ConcurrentModificationError(InterprepException):
    """Raised when a record was changed by another request between read and write."""
    pass
