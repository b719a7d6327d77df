from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional

from .errors import FieldViolation, ValidationError

MIN_MAKE_LENGTH = 1
MAX_MAKE_LENGTH = 20
MIN_MODEL_LENGTH = 1
MAX_MODEL_LENGTH = 20
MIN_YEAR = 1999
MAX_YEAR = 2020
VIN_LENGTH = 17

# compared case-insensitively
INVALID_MANUFACTURERS = {"ford"}


@dataclass
class Motorcycle:
    """
    A motorcycle record.

    ``id``, ``created_utc`` and ``modified_utc`` belong to the repository: a
    record built by a caller has id 0 and no timestamps until it is inserted.
    """

    make: str
    model: str
    year: int
    vin: str
    id: int = 0
    created_utc: Optional[datetime] = None
    modified_utc: Optional[datetime] = None

    @classmethod
    def create(cls, make: str, model: str, year: int, vin: str) -> "Motorcycle":
        """
        Build a transient motorcycle and validate it.

        Raises:
            ValidationError: If any field breaks a business rule.
        """
        motorcycle = cls(make=make, model=model, year=year, vin=vin)
        motorcycle.check()
        return motorcycle

    def validate(self) -> List[FieldViolation]:
        violations: List[FieldViolation] = []
        for rule in _RULES:
            violations.extend(rule(self))
        return violations

    def check(self) -> None:
        violations = self.validate()
        if violations:
            raise ValidationError(violations)

    def copy(self) -> "Motorcycle":
        return replace(self)


def _length_violations(
    field: str, value, min_length: int, max_length: int
) -> List[FieldViolation]:
    if not isinstance(value, str):
        return [FieldViolation(field, "must be a string")]
    if not min_length <= len(value) <= max_length:
        return [
            FieldViolation(
                field, f"length must be between {min_length} and {max_length}"
            )
        ]
    return []


def _validate_make(motorcycle: Motorcycle) -> List[FieldViolation]:
    violations = _length_violations(
        "make", motorcycle.make, MIN_MAKE_LENGTH, MAX_MAKE_LENGTH
    )
    if isinstance(motorcycle.make, str) and motorcycle.make.lower() in INVALID_MANUFACTURERS:
        violations.append(FieldViolation("make", f"cannot be {motorcycle.make}"))
    return violations


def _validate_model(motorcycle: Motorcycle) -> List[FieldViolation]:
    return _length_violations(
        "model", motorcycle.model, MIN_MODEL_LENGTH, MAX_MODEL_LENGTH
    )


def _validate_year(motorcycle: Motorcycle) -> List[FieldViolation]:
    year = motorcycle.year
    # bool is an int subclass
    if isinstance(year, bool) or not isinstance(year, int):
        return [FieldViolation("year", "must be an integer")]
    if not MIN_YEAR <= year <= MAX_YEAR:
        return [FieldViolation("year", f"must be between {MIN_YEAR} and {MAX_YEAR}")]
    return []


def _validate_vin(motorcycle: Motorcycle) -> List[FieldViolation]:
    vin = motorcycle.vin
    if not isinstance(vin, str):
        return [FieldViolation("vin", "must be a string")]
    if len(vin) != VIN_LENGTH:
        return [FieldViolation("vin", f"must contain {VIN_LENGTH} characters")]
    return []


_RULES: List[Callable[[Motorcycle], List[FieldViolation]]] = [
    _validate_make,
    _validate_model,
    _validate_year,
    _validate_vin,
]
