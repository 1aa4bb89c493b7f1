"""Profile field exceptions."""
from rest_framework.exceptions import ValidationError


class ProfileFieldError(Exception):
    """Base error for the profile field component."""


class UnknownFieldTypeError(ProfileFieldError):
    """Raised when a definition names a datatype tag with no registered type."""

    def __init__(self, datatype):
        self.datatype = datatype
        super().__init__(f"No profile field type registered for datatype '{datatype}'")


class ProfileFieldValidationError(ValidationError):
    """
    Submitted profile data failed validation.

    ``errors`` maps field shortnames to lists of messages. Rendered by the
    global exception handler as a VALIDATION_ERROR response.
    """

    def __init__(self, errors):
        self.errors = errors
        super().__init__(detail=errors)
