"""
Error kinds raised by the entity and the repositories.

Each error carries the OperationStatus that a use case reports when the
error reaches it, so interactors can build a response without inspecting
the concrete exception type.
"""

from dataclasses import dataclass
from typing import List

from .enums import OperationStatus


class MotorcycleError(Exception):
    status = OperationStatus.INTERNAL_ERROR


@dataclass(frozen=True)
class FieldViolation:
    field: str
    message: str

    def __str__(self) -> str:
        return f"{self.field}: {self.message}"


class ValidationError(MotorcycleError):
    status = OperationStatus.VALIDATION_ERROR

    def __init__(self, violations: List[FieldViolation]):
        self.violations = list(violations)
        super().__init__("; ".join(str(v) for v in self.violations))


class ConflictError(MotorcycleError):
    status = OperationStatus.CONFLICT


class NotFoundError(MotorcycleError):
    status = OperationStatus.NOT_FOUND


class NotAuthenticatedError(MotorcycleError):
    status = OperationStatus.NOT_AUTHENTICATED


class NotAuthorizedError(MotorcycleError):
    status = OperationStatus.NOT_AUTHORIZED


class InternalError(MotorcycleError):
    status = OperationStatus.INTERNAL_ERROR
