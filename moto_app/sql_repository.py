"""
Motorcycle repository backed by SQLAlchemy.

One session is held for the lifetime of the repository and acts as the unit
of work: every mutation is flushed so later queries see it, and ``save``
commits. A failed flush rolls the session back before the error is raised,
so no partial change from a rejected operation remains pending.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from .contracts import MotorcycleRepository
from .db import MotorcycleRecord, as_utc
from .entity import Motorcycle
from .errors import ConflictError, InternalError, NotFoundError

logger = logging.getLogger(__name__)


class SqlMotorcycleRepository(MotorcycleRepository):
    def __init__(self, session_factory: sessionmaker):
        self._session = session_factory()
        self._lock = threading.RLock()

    def list(self) -> List[Motorcycle]:
        with self._lock:
            try:
                records = (
                    self._session.query(MotorcycleRecord).order_by(MotorcycleRecord.id).all()
                )
            except SQLAlchemyError as e:
                self._read_failed(e)
            return [record.to_entity() for record in records]

    def insert(self, motorcycle: Motorcycle) -> Motorcycle:
        with self._lock:
            if motorcycle.id and self._record_by_id(motorcycle.id) is not None:
                raise ConflictError(
                    f"cannot insert the motorcycle with ID {motorcycle.id} because it already exists"
                )
            if self._record_by_vin(motorcycle.vin) is not None:
                raise ConflictError(
                    f"cannot insert the motorcycle with VIN {motorcycle.vin} because it already exists"
                )

            motorcycle.check()
            record = MotorcycleRecord(
                make=motorcycle.make,
                model=motorcycle.model,
                year=motorcycle.year,
                vin=motorcycle.vin,
                created_utc=datetime.now(timezone.utc),
            )
            self._session.add(record)
            self._flush()
            logger.debug(f"Inserted motorcycle {record.id} with VIN {record.vin}")
            return record.to_entity()

    def update(self, id: int, motorcycle: Motorcycle) -> Motorcycle:
        with self._lock:
            record = self._record_by_id(id)
            if record is None:
                raise NotFoundError(
                    f"cannot update the motorcycle with ID {id} because it was not found"
                )
            owner = self._record_by_vin(motorcycle.vin)
            if owner is not None and owner.id != id:
                raise ConflictError(
                    f"cannot update the motorcycle with ID {id} because VIN {motorcycle.vin} belongs to another motorcycle"
                )

            staged = Motorcycle(
                make=motorcycle.make,
                model=motorcycle.model,
                year=motorcycle.year,
                vin=motorcycle.vin,
                id=record.id,
                created_utc=as_utc(record.created_utc),
                modified_utc=datetime.now(timezone.utc),
            )
            staged.check()

            record.make = staged.make
            record.model = staged.model
            record.year = staged.year
            record.vin = staged.vin
            record.modified_utc = staged.modified_utc
            self._flush()
            logger.debug(f"Updated motorcycle {id}")
            return record.to_entity()

    def delete(self, id: int) -> None:
        with self._lock:
            record = self._record_by_id(id)
            if record is None:
                raise NotFoundError(
                    f"cannot delete the motorcycle with ID {id} because it was not found"
                )
            self._session.delete(record)
            self._flush()
            logger.debug(f"Deleted motorcycle {id}")

    def find_by_id(self, id: int) -> Optional[Motorcycle]:
        with self._lock:
            record = self._record_by_id(id)
            return None if record is None else record.to_entity()

    def find_by_vin(self, vin: str) -> Optional[Motorcycle]:
        with self._lock:
            record = self._record_by_vin(vin)
            return None if record is None else record.to_entity()

    def save(self) -> None:
        with self._lock:
            try:
                self._session.commit()
            except SQLAlchemyError as e:
                self._session.rollback()
                logger.exception("Failed to commit motorcycle changes")
                raise InternalError("failed to save the motorcycle changes") from e

    def close(self) -> None:
        self._session.close()

    def _record_by_id(self, id: int) -> Optional[MotorcycleRecord]:
        if not isinstance(id, int):
            return None
        try:
            return self._session.get(MotorcycleRecord, id)
        except SQLAlchemyError as e:
            self._read_failed(e)

    def _record_by_vin(self, vin: str) -> Optional[MotorcycleRecord]:
        if not isinstance(vin, str):
            return None
        try:
            return (
                self._session.query(MotorcycleRecord)
                .filter(MotorcycleRecord.vin == vin)
                .first()
            )
        except SQLAlchemyError as e:
            self._read_failed(e)

    def _read_failed(self, e: SQLAlchemyError) -> None:
        self._session.rollback()
        logger.exception("Failed to read motorcycles")
        raise InternalError("failed to read the motorcycles") from e

    def _flush(self) -> None:
        try:
            self._session.flush()
        except IntegrityError as e:
            self._session.rollback()
            raise ConflictError("the motorcycle conflicts with an existing one") from e
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.exception("Failed to write motorcycle changes")
            raise InternalError("failed to write the motorcycle changes") from e
