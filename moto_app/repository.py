import logging
import threading
from bisect import bisect_left, insort
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from .contracts import MotorcycleRepository
from .entity import Motorcycle
from .errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class InMemoryMotorcycleRepository(MotorcycleRepository):
    """
    Motorcycles held in process memory for the lifetime of the instance.

    Records are kept in insertion order, which is also ascending id order
    because ids are handed out by an increasing counter and inserts only
    append. Lookups by id bisect that list; lookups by VIN bisect a sorted
    ``(vin, id)`` index that is maintained on every mutation.

    Every public method holds the same lock, so the uniqueness and ordering
    invariants survive concurrent callers.
    """

    def __init__(self):
        self._motorcycles: List[Motorcycle] = []
        self._vin_index: List[Tuple[str, int]] = []
        self._next_id = 0
        self._lock = threading.RLock()

    def list(self) -> List[Motorcycle]:
        with self._lock:
            return [motorcycle.copy() for motorcycle in self._motorcycles]

    def insert(self, motorcycle: Motorcycle) -> Motorcycle:
        with self._lock:
            if motorcycle.id and self._position_by_id(motorcycle.id) is not None:
                raise ConflictError(
                    f"cannot insert the motorcycle with ID {motorcycle.id} because it already exists"
                )
            if self._position_by_vin(motorcycle.vin) is not None:
                raise ConflictError(
                    f"cannot insert the motorcycle with VIN {motorcycle.vin} because it already exists"
                )

            staged = motorcycle.copy()
            staged.id = self._next_id + 1
            staged.created_utc = datetime.now(timezone.utc)
            staged.modified_utc = None
            # an invalid motorcycle must not consume an id
            staged.check()

            self._next_id = staged.id
            self._motorcycles.append(staged)
            insort(self._vin_index, (staged.vin, staged.id))
            logger.debug(f"Inserted motorcycle {staged.id} with VIN {staged.vin}")
            return staged.copy()

    def update(self, id: int, motorcycle: Motorcycle) -> Motorcycle:
        with self._lock:
            i = self._position_by_id(id)
            if i is None:
                raise NotFoundError(
                    f"cannot update the motorcycle with ID {id} because it was not found"
                )
            stored = self._motorcycles[i]

            j = self._position_by_vin(motorcycle.vin)
            if j is not None and self._vin_index[j][1] != id:
                raise ConflictError(
                    f"cannot update the motorcycle with ID {id} because VIN {motorcycle.vin} belongs to another motorcycle"
                )

            staged = Motorcycle(
                make=motorcycle.make,
                model=motorcycle.model,
                year=motorcycle.year,
                vin=motorcycle.vin,
                id=stored.id,
                created_utc=stored.created_utc,
                modified_utc=datetime.now(timezone.utc),
            )
            staged.check()

            old_vin = stored.vin
            stored.make = staged.make
            stored.model = staged.model
            stored.year = staged.year
            stored.vin = staged.vin
            stored.modified_utc = staged.modified_utc
            if old_vin != stored.vin:
                self._vin_index.pop(self._position_by_vin(old_vin))
                insort(self._vin_index, (stored.vin, stored.id))
            logger.debug(f"Updated motorcycle {id}")
            return stored.copy()

    def delete(self, id: int) -> None:
        with self._lock:
            i = self._position_by_id(id)
            if i is None:
                raise NotFoundError(
                    f"cannot delete the motorcycle with ID {id} because it was not found"
                )
            removed = self._motorcycles.pop(i)
            self._vin_index.pop(self._position_by_vin(removed.vin))
            logger.debug(f"Deleted motorcycle {id}")

    def find_by_id(self, id: int) -> Optional[Motorcycle]:
        with self._lock:
            i = self._position_by_id(id)
            return None if i is None else self._motorcycles[i].copy()

    def find_by_vin(self, vin: str) -> Optional[Motorcycle]:
        with self._lock:
            j = self._position_by_vin(vin)
            if j is None:
                return None
            return self.find_by_id(self._vin_index[j][1])

    def save(self) -> None:
        # Nothing to flush; changes are applied as they are made.
        return None

    def _position_by_id(self, id: int) -> Optional[int]:
        if not isinstance(id, int):
            return None
        i = bisect_left(self._motorcycles, id, key=lambda m: m.id)
        if i < len(self._motorcycles) and self._motorcycles[i].id == id:
            return i
        return None

    def _position_by_vin(self, vin: str) -> Optional[int]:
        if not isinstance(vin, str):
            return None
        # (vin,) sorts before every (vin, id) pair with the same VIN
        j = bisect_left(self._vin_index, (vin,))
        if j < len(self._vin_index) and self._vin_index[j][0] == vin:
            return j
        return None
