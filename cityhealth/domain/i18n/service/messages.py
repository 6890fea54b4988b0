"""Translation keys for user-facing error messages.

Backend error text is never shown to users; each error class maps to a
short localized message instead.
"""

from cityhealth.domain.shared.error import (
    AuthorizationError,
    CityHealthError,
    CursorNotAvailableError,
    NotFoundError,
    QueryConfigurationError,
    StorageUnavailableError,
    TemplateNotFoundError,
    ValidationError,
)

GENERIC_ERROR_KEY = "errors.generic"

# Most specific class first
_ERROR_KEYS: list[tuple[type[CityHealthError], str]] = [
    (QueryConfigurationError, "errors.searchUnavailable"),
    (CursorNotAvailableError, "errors.pageUnavailable"),
    (TemplateNotFoundError, "errors.pageNotFound"),
    (NotFoundError, "errors.notFound"),
    (ValidationError, "errors.invalidInput"),
    (AuthorizationError, "errors.signInRequired"),
    (StorageUnavailableError, "errors.network"),
]


def error_message_key(error: BaseException) -> str:
    for error_type, key in _ERROR_KEYS:
        if isinstance(error, error_type):
            return key
    return GENERIC_ERROR_KEY
