"""
Capabilities the use cases depend on.

Interactors only see these abstract classes, so the in-memory repository,
the SQL repository and test doubles are interchangeable.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .entity import Motorcycle
from .enums import AuthorizationRole


class MotorcycleRepository(ABC):
    @abstractmethod
    def list(self) -> List[Motorcycle]:
        """Return every motorcycle in insertion order, never None."""

    @abstractmethod
    def insert(self, motorcycle: Motorcycle) -> Motorcycle:
        """
        Add a motorcycle and return it with its assigned id.

        Raises:
            ConflictError: If the id or VIN is already present.
            ValidationError: If the motorcycle breaks a business rule.
        """

    @abstractmethod
    def update(self, id: int, motorcycle: Motorcycle) -> Motorcycle:
        """
        Overwrite the mutable fields of the motorcycle stored under ``id``.

        Raises:
            NotFoundError: If no motorcycle has this id.
            ConflictError: If the VIN belongs to another motorcycle.
            ValidationError: If the result would break a business rule.
        """

    @abstractmethod
    def delete(self, id: int) -> None:
        """
        Raises:
            NotFoundError: If no motorcycle has this id.
        """

    @abstractmethod
    def find_by_id(self, id: int) -> Optional[Motorcycle]:
        pass

    @abstractmethod
    def find_by_vin(self, vin: str) -> Optional[Motorcycle]:
        pass

    def exists_by_id(self, id: int) -> bool:
        return self.find_by_id(id) is not None

    def exists_by_vin(self, vin: str) -> bool:
        return self.find_by_vin(vin) is not None

    @abstractmethod
    def save(self) -> None:
        """Commit pending changes."""


class AuthService(ABC):
    @abstractmethod
    def is_authenticated(self) -> bool:
        pass

    @abstractmethod
    def is_authorized(self, role: AuthorizationRole) -> bool:
        pass
