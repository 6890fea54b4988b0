"""Centralized error transformation for API routes.

Maps CityHealth errors (domain and infrastructure) to HTTPException
responses carrying a localized message instead of the backend text.
"""

from typing import Any

from fastapi import HTTPException

from cityhealth.domain.i18n.service.messages import error_message_key
from cityhealth.domain.i18n.service.translator import Translator
from cityhealth.domain.shared.error import (
    AuthorizationError,
    CityHealthError,
    CursorNotAvailableError,
    DomainError,
    InfrastructureError,
    InvalidStateError,
    NotFoundError,
    RouteNotFoundError,
    ValidationError,
)

DOMAIN_ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: 404,
    RouteNotFoundError: 404,
    ValidationError: 422,
    InvalidStateError: 409,
    CursorNotAvailableError: 409,
    AuthorizationError: 403,
}


def map_cityhealth_error(
    error: CityHealthError, translator: Translator | None = None
) -> HTTPException:
    """Map a CityHealth error to an HTTPException.

    Args:
        error: The error to map.
        translator: Localizes the message; without one the message is the translation key.

    Returns:
        HTTPException with appropriate status code and detail.
    """
    key = error_message_key(error)
    detail: dict[str, Any] = {
        "code": error.code,
        "message": translator.t(key) if translator is not None else key,
    }

    if isinstance(error, InfrastructureError):
        return HTTPException(status_code=503, detail=detail)

    if isinstance(error, DomainError):
        status_code = DOMAIN_ERROR_STATUS_MAP.get(type(error), 400)
        if isinstance(error, ValidationError) and error.field is not None:
            detail["field"] = error.field
        # Anonymous callers get 401, signed-in callers without the role 403
        if isinstance(error, AuthorizationError) and error.code == "sign_in_required":
            return HTTPException(status_code=401, detail=detail)
        return HTTPException(status_code=status_code, detail=detail)

    return HTTPException(status_code=500, detail=detail)
