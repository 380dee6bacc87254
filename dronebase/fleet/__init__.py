"""Mini README: Drone fleet subsystem package initialiser.

Re-exports the registry and record types. ``database`` holds the table
mapping and session factory; ``registry`` holds the operations used by the
web handlers.
"""

from .database import create_session_factory
from .registry import DroneRecord, FleetRegistry

__all__ = ["DroneRecord", "FleetRegistry", "create_session_factory"]
