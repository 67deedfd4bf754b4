import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BadRequest(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request."
    default_code = "bad_request"


class Conflict(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "Conflict."
    default_code = "conflict"


class ProviderError(APIException):
    """An external service (Stripe, Gemini) failed to answer."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "External service request failed."
    default_code = "provider_error"


def _first_message(detail) -> str:
    if isinstance(detail, dict):
        for value in detail.values():
            return _first_message(value)
        return "Invalid request."
    if isinstance(detail, (list, tuple)):
        return _first_message(detail[0]) if detail else "Invalid request."
    return str(detail)


def api_exception_handler(exc, context):
    """
    Render every API error as ``{"message": ...}``.

    Validation errors keep DRF's per-field payload under ``errors`` so form
    clients can still highlight individual inputs.
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        response.data = {
            "message": _first_message(response.data),
            "errors": response.data,
        }
    elif isinstance(response.data, dict) and "detail" in response.data:
        response.data = {"message": str(response.data["detail"])}

    if response.status_code >= 500:
        view = context.get("view")
        logger.error(
            "%s failed: %s", view.__class__.__name__ if view else "API view", exc
        )
    return response
