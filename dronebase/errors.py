"""Mini README: Error taxonomy shared by the Dronebase services.

Structure:
    * DronebaseError - root of every service-level failure.
    * CoordinateValidationError - malformed or out-of-range coordinates.
    * PersistenceError - artefact or storage writes that did not complete.
    * DroneNotFoundError - lookups against an unknown drone identifier.

Services raise these; the HTTP boundary maps them to status codes. The
messages are safe to show to callers, the underlying causes are not and are
only ever chained via ``raise ... from``.
"""

from __future__ import annotations


class DronebaseError(Exception):
    """Base class for errors raised by Dronebase services."""


class CoordinateValidationError(DronebaseError, ValueError):
    """Raised when a coordinate is not finite or lies outside WGS84 bounds."""


class PersistenceError(DronebaseError):
    """Raised when a write could not be made durable."""


class PlanPersistenceError(PersistenceError):
    """Raised when a mission plan file could not be written."""


class StoragePersistenceError(PersistenceError):
    """Raised when the fleet store rejected a read or write."""


class DroneNotFoundError(DronebaseError, KeyError):
    """Raised when no drone record exists for the requested identifier."""

    def __init__(self, drone_id: int) -> None:
        super().__init__(f"Drone {drone_id} not found")
        self.drone_id = drone_id

    def __str__(self) -> str:
        return str(self.args[0])
