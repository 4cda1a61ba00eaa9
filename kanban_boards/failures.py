"""Failure kinds returned by application services

Services never let exceptions cross their boundary. Each failure carries a
human readable message, a stable error code and optional context, and the
route layer maps the failure kind to an HTTP status.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass(frozen=True)
class FieldViolation:
    """A single rejected input field"""

    field: str
    message: str
    rejected_value: Any = None


@dataclass(frozen=True)
class Failure:
    message: str
    error_code: str
    context: Optional[dict] = None

    status_code = 500


@dataclass(frozen=True)
class InputError(Failure):
    """Malformed or missing input (400)"""

    violations: List[FieldViolation] = field(default_factory=list)

    status_code = 400


@dataclass(frozen=True)
class PermissionDenied(Failure):
    """Authorization failed or a rule denies the action (403)"""

    status_code = 403


@dataclass(frozen=True)
class NotFound(Failure):
    """Entity absent (404)"""

    status_code = 404


@dataclass(frozen=True)
class ResourceConflict(Failure):
    """State conflict such as an archived board or an invalid position (409)"""

    status_code = 409


@dataclass(frozen=True)
class BusinessRuleViolation(Failure):
    """Valid input that breaks a policy limit (422)"""

    status_code = 422


@dataclass(frozen=True)
class InternalError(Failure):
    """Unexpected exception from a collaborator or domain method (500)"""

    status_code = 500


# =============================================================================
# Factories
# =============================================================================

def input_error(message: str, violations: List[FieldViolation], error_code: str = "INVALID_INPUT") -> InputError:
    return InputError(message=message, error_code=error_code, violations=list(violations))


def not_found(message: str, error_code: str = "NOT_FOUND", context: Optional[dict] = None) -> NotFound:
    return NotFound(message=message, error_code=error_code, context=context)


def permission_denied(
    message: str, error_code: str = "PERMISSION_DENIED", context: Optional[dict] = None
) -> PermissionDenied:
    return PermissionDenied(message=message, error_code=error_code, context=context)


def conflict(message: str, error_code: str = "RESOURCE_CONFLICT", context: Optional[dict] = None) -> ResourceConflict:
    return ResourceConflict(message=message, error_code=error_code, context=context)


def business_rule_violation(
    message: str, error_code: str = "BUSINESS_RULE_VIOLATION", context: Optional[dict] = None
) -> BusinessRuleViolation:
    return BusinessRuleViolation(message=message, error_code=error_code, context=context)


def internal_error(message: str, error_code: str = "INTERNAL_ERROR", context: Optional[dict] = None) -> InternalError:
    return InternalError(message=message, error_code=error_code, context=context)
