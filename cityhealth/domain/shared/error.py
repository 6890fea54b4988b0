"""Error hierarchy for CityHealth.

Error layers:
- CityHealthError: Base class for all CityHealth errors
- DomainError: Business rule violations, validation failures (4xx responses)
- InfrastructureError: System-level failures like storage/network issues (503 responses)

These errors are mapped to HTTP responses by the global exception handler in app.py,
and to localized user-facing messages by the page modules.
"""


class CityHealthError(Exception):
    """Base class for all CityHealth errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


# =============================================================================
# Domain Errors (business logic violations - typically 4xx)
# =============================================================================


class DomainError(CityHealthError):
    """Base class for domain/business errors."""


class NotFoundError(DomainError):
    """Resource not found."""


class RouteNotFoundError(NotFoundError):
    """No registered route pattern matches the path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No route matches path: {path}", code="route_not_found")
        self.path = path


class ValidationError(DomainError):
    """Input validation failed."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR")
        self.field = field


class InvalidStateError(DomainError):
    """Operation not allowed in current state."""


class AuthorizationError(DomainError):
    """User not authorized for this operation."""


class CursorNotAvailableError(DomainError):
    """No pagination cursor is known for the page preceding the requested one."""

    def __init__(self, context_key: str, page: int) -> None:
        super().__init__(
            f"Cursor for page {page - 1} not available; request earlier pages first",
            code="cursor_not_available",
        )
        self.context_key = context_key
        self.page = page


# =============================================================================
# Infrastructure Errors (system-level failures - typically 503)
# =============================================================================


class InfrastructureError(CityHealthError):
    """Base class for infrastructure/system errors."""


class StorageUnavailableError(InfrastructureError):
    """Storage backend (database, object store) is unavailable."""


class ExternalServiceError(InfrastructureError):
    """External service is unavailable or failed."""


class TemplateNotFoundError(InfrastructureError):
    """Page markup could not be fetched from the template store."""

    def __init__(self, path: str, reason: str | None = None) -> None:
        message = f"Template not available: {path}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message, code="template_not_found")
        self.path = path


class ConfigurationError(InfrastructureError):
    """System misconfiguration detected."""


class QueryConfigurationError(ConfigurationError):
    """The backend rejected a query because a required composite index is missing.

    This is a deployment defect, not an empty result.
    """

    def __init__(self, message: str, fields: list[str] | None = None) -> None:
        super().__init__(message, code="missing_index")
        self.fields = fields or []
