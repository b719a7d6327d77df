from enum import Enum


class OperationStatus(str, Enum):
    """Outcome of a use case, translated to an HTTP status code by the API layer."""

    OK = "Ok"
    VALIDATION_ERROR = "ValidationError"
    CONFLICT = "Conflict"
    NOT_FOUND = "NotFound"
    NOT_AUTHENTICATED = "NotAuthenticated"
    NOT_AUTHORIZED = "NotAuthorized"
    INTERNAL_ERROR = "InternalError"


class AuthorizationRole(str, Enum):
    """Authorization granted to an authenticated user to access a resource."""

    UNDEFINED = "undefined"
    NONE = "none"
    ADMIN = "admin"
    ACCOUNTING = "accounting"
    GENERAL = "general"
