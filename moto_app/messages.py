"""
Request and response messages exchanged with the use case interactors.

A response always carries an OperationStatus. It either holds a payload and
no error (status OK), or an error and an empty payload; the constructors
reject any other combination.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

from .entity import Motorcycle
from .enums import OperationStatus
from .errors import MotorcycleError


@dataclass(frozen=True)
class InsertMotorcycleRequest:
    make: str
    model: str
    year: int
    vin: str


@dataclass(frozen=True)
class UpdateMotorcycleRequest:
    id: int
    make: str
    model: str
    year: int
    vin: str


@dataclass(frozen=True)
class DeleteMotorcycleRequest:
    id: int


@dataclass(frozen=True)
class GetMotorcycleRequest:
    id: int


@dataclass(frozen=True)
class ListMotorcyclesRequest:
    pass


@dataclass
class _Response(ABC):
    status: OperationStatus
    error: Optional[MotorcycleError] = None

    def __post_init__(self):
        if self.error is None:
            if self.status is not OperationStatus.OK or not self._has_payload():
                raise ValueError(
                    f"{type(self).__name__} without an error needs status Ok and a payload"
                )
        else:
            if self.status is not self.error.status or self._has_payload():
                raise ValueError(
                    f"{type(self).__name__} with an error needs the error's status and no payload"
                )

    @abstractmethod
    def _has_payload(self) -> bool:
        ...

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return str(self.error) if self.error is not None else self.status.value


@dataclass
class InsertMotorcycleResponse(_Response):
    id: Optional[int] = None

    def _has_payload(self) -> bool:
        return self.id is not None


@dataclass
class UpdateMotorcycleResponse(_Response):
    id: Optional[int] = None

    def _has_payload(self) -> bool:
        return self.id is not None


@dataclass
class DeleteMotorcycleResponse(_Response):
    id: Optional[int] = None

    def _has_payload(self) -> bool:
        return self.id is not None


@dataclass
class GetMotorcycleResponse(_Response):
    motorcycle: Optional[Motorcycle] = None

    def _has_payload(self) -> bool:
        return self.motorcycle is not None


@dataclass
class ListMotorcyclesResponse(_Response):
    motorcycles: List[Motorcycle] = field(default_factory=list)

    def _has_payload(self) -> bool:
        # an empty list is a valid payload on success and the empty payload on failure
        if self.error is None:
            return self.motorcycles is not None
        return bool(self.motorcycles)
