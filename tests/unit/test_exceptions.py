"""
Unit tests for the exception hierarchy.
"""
import pytest

from app.exceptions import (
    AIServiceError, ConfigurationError, InterprepException, InvalidResponseError,
    ServiceUnavailableError, UnknownProviderError, UploadValidationError
)


class TestExceptions:

    @pytest.mark.unit
    def test_message_and_context(self):
        error = UploadValidationError("Only PDF files are supported", {"mime_type": "text/plain"})

        assert str(error) == "Only PDF files are supported"
        assert error.message == "Only PDF files are supported"
        assert error.context == {"mime_type": "text/plain"}

    @pytest.mark.unit
    def test_context_defaults_to_empty(self):
        assert InterprepException("boom").context == {}

    @pytest.mark.unit
    @pytest.mark.parametrize("error_class, parent", [
        (ServiceUnavailableError, AIServiceError),
        (InvalidResponseError, AIServiceError),
        (UnknownProviderError, ConfigurationError),
        (AIServiceError, InterprepException),
    ])
    def test_hierarchy(self, error_class, parent):
        assert issubclass(error_class, parent)
