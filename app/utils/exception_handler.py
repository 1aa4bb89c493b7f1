import logging
from django.http import Http404
from rest_framework.views import exception_handler
from rest_framework.exceptions import (
    APIException,
    ValidationError,
    NotAuthenticated,
    AuthenticationFailed,
    PermissionDenied
)
from rest_framework import status
from app.utils.response import api_response

logger = logging.getLogger(__name__)


def _error_strings(errors):
    if isinstance(errors, (list, tuple)):
        return [getattr(error, "string", str(error)) for error in errors]
    return [getattr(errors, "string", str(errors))]


def format_validation_error(error_detail):
    """
    Convert DRF ValidationError detail into a readable error message.

    Handles:
    - Dict format: {'favourite_colour': [ErrorDetail(...)]} -> "Favourite Colour: Select a valid choice."
    - List format: [ErrorDetail(...)] -> "Select a valid choice."
    - String format: "error message" -> "error message"
    """
    if isinstance(error_detail, dict):
        # Field-level errors
        messages = []
        for field, errors in error_detail.items():
            field_name = str(field).replace('_', ' ').title()
            messages.append(f"{field_name}: {', '.join(_error_strings(errors))}")
        return ". ".join(messages)

    elif isinstance(error_detail, list):
        return ". ".join(_error_strings(error_detail))

    return str(error_detail)


def custom_exception_handler(exc, context):
    """
    Global exception handler.
    Ensures ALL API errors use the api_response() format.
    """
    # Let DRF convert Django's Http404/PermissionDenied first
    exception_handler(exc, context)

    view = context.get('view', None)
    view_name = view.__class__.__name__ if view else 'UnknownView'
    logger.error(f"[{view_name}] Exception: {exc}")

    # --- Handle Auth Errors ---
    if isinstance(exc, (NotAuthenticated, AuthenticationFailed)):
        return api_response(
            status_code=status.HTTP_401_UNAUTHORIZED,
            status="failure",
            data={},
            error_code="AUTH_ERROR",
            error_message="Authentication credentials were not provided or invalid."
        )

    # --- Handle Permission Denied ---
    if isinstance(exc, PermissionDenied):
        return api_response(
            status_code=status.HTTP_403_FORBIDDEN,
            status="failure",
            data={},
            error_code="PERMISSION_DENIED",
            error_message="You do not have permission to perform this action."
        )

    # --- Handle Not Found ---
    if isinstance(exc, Http404):
        return api_response(
            status_code=status.HTTP_404_NOT_FOUND,
            status="failure",
            data={},
            error_code="NOT_FOUND",
            error_message=str(exc) or "Not found."
        )

    # --- Handle Validation Errors ---
    if isinstance(exc, ValidationError):
        return api_response(
            status_code=status.HTTP_400_BAD_REQUEST,
            status="failure",
            data={"errors": exc.detail},
            error_code="VALIDATION_ERROR",
            error_message=format_validation_error(exc.detail)
        )

    # --- Handle other DRF API Exceptions (like NotFound, ParseError, etc.) ---
    if isinstance(exc, APIException):
        return api_response(
            status_code=getattr(exc, 'status_code', status.HTTP_500_INTERNAL_SERVER_ERROR),
            status="failure",
            data={},
            error_code="API_EXCEPTION",
            error_message=format_validation_error(exc.detail)
        )

    # --- Handle Unexpected Server Errors ---
    logger.exception("Unhandled Exception", exc_info=exc)
    return api_response(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        status="failure",
        data={},
        error_code="INTERNAL_SERVER_ERROR",
        error_message="An unexpected error occurred. Please try again later."
    )
