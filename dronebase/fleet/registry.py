"""Mini README: Fleet registry tracking drones and their operational status.

Structure:
    * DroneRecord - immutable snapshot of a stored drone.
    * FleetRegistry - add/list/get/update-status operations over the store.

Every operation runs in its own session and transaction. Mutations are
serialised by a registry-wide lock, so a concurrent read observes a record
either before or after an update, never halfway through one.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ..configuration import get_settings
from ..errors import DroneNotFoundError, StoragePersistenceError
from ..logging_utils import get_logger
from .database import DroneRow, create_session_factory

LOGGER = get_logger(__name__)

# Storage assigns ids from 1; SQL INTEGER columns hold signed 64-bit values.
MAX_DRONE_ID = 2**63 - 1


@dataclass(frozen=True, slots=True)
class DroneRecord:
    """Identity and last reported status of one fleet member."""

    id: int
    status: str

    @classmethod
    def from_row(cls, row: DroneRow) -> "DroneRecord":
        return cls(id=int(row.id), status=str(row.status))

    def as_dict(self) -> Dict[str, Union[int, str]]:
        return {"id": self.id, "status": self.status}


def _check_storable(drone_id: int) -> None:
    """Ids outside the storable range can never match a record."""

    if not 1 <= drone_id <= MAX_DRONE_ID:
        raise DroneNotFoundError(drone_id)


class FleetRegistry:
    """CRUD-style access to the persistent drone fleet."""

    def __init__(self, session_factory: Optional[sessionmaker] = None) -> None:
        if session_factory is None:
            session_factory = create_session_factory(get_settings().database_url)
        self._session_factory = session_factory
        self._write_lock = threading.Lock()

    @contextmanager
    def _session(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as error:
            session.rollback()
            LOGGER.exception("Fleet storage operation failed")
            raise StoragePersistenceError("Fleet storage is unavailable") from error
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def add_drone(self, status: str) -> DroneRecord:
        """Store a new drone and return it with its generated identifier."""

        with self._write_lock, self._session() as session:
            row = DroneRow(status=status)
            session.add(row)
            session.flush()
            record = DroneRecord.from_row(row)
        LOGGER.info("Added drone %s with status '%s'", record.id, record.status)
        return record

    def list_drones(self) -> List[DroneRecord]:
        """Return every stored drone ordered by identifier."""

        with self._session() as session:
            rows = session.query(DroneRow).order_by(DroneRow.id).all()
            records = [DroneRecord.from_row(row) for row in rows]
        LOGGER.debug("Listing %s drones", len(records))
        return records

    def get_drone(self, drone_id: int) -> DroneRecord:
        """Retrieve a drone, raising ``DroneNotFoundError`` when missing."""

        _check_storable(drone_id)
        with self._session() as session:
            row = session.get(DroneRow, drone_id)
            if row is None:
                raise DroneNotFoundError(drone_id)
            return DroneRecord.from_row(row)

    def update_status(self, drone_id: int, status: str) -> DroneRecord:
        """Replace the status of an existing drone."""

        _check_storable(drone_id)
        with self._write_lock, self._session() as session:
            row = session.get(DroneRow, drone_id)
            if row is None:
                LOGGER.info("Status update rejected: drone %s not found", drone_id)
                raise DroneNotFoundError(drone_id)
            previous = row.status
            row.status = status
            session.flush()
            record = DroneRecord.from_row(row)
        LOGGER.info("Drone %s status '%s' -> '%s'", drone_id, previous, status)
        return record
