"""Mini README: Coordinate ingestion and mission plan persistence.

Structure:
    * validate_coordinate - rejects non-finite or out-of-range positions.
    * CoordinateLog - bounded, thread-safe append-only log of received points.
    * IngestedPlan - result of a successful ingestion.
    * CoordinateIngestor - validates, records, encodes and writes plan files.

Plan files are named after the local time of ingestion
(``Mission_YYYYMMDD_HHMMSS.plan``). Files are created exclusively, so two
ingestions within the same second receive a numbered suffix instead of
overwriting each other. A plan is flushed to disk before ``ingest`` returns.
"""

from __future__ import annotations

import math
import os
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Deque, Dict, List, Optional

from ..configuration import get_settings
from ..errors import CoordinateValidationError, PlanPersistenceError
from ..logging_utils import get_logger
from ..mission_planning import Coordinate, encode_plan, serialise_plan

LOGGER = get_logger(__name__)

PLAN_SUFFIX = ".plan"
_MAX_NAME_ATTEMPTS = 1000


def validate_coordinate(coordinate: Coordinate) -> Coordinate:
    """Return the coordinate unchanged or raise ``CoordinateValidationError``."""

    latitude, longitude = coordinate.latitude, coordinate.longitude
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise CoordinateValidationError("Latitude and longitude must be finite numbers")
    if not -90.0 <= latitude <= 90.0:
        raise CoordinateValidationError(f"Latitude {latitude} is outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise CoordinateValidationError(f"Longitude {longitude} is outside [-180, 180]")
    return coordinate


def plan_file_stem(moment: datetime) -> str:
    """Return the timestamp based stem used for plan file names."""

    return f"Mission_{moment:%Y%m%d_%H%M%S}"


class CoordinateLog:
    """Append-only record of received coordinates, oldest evicted first."""

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("Coordinate log capacity must be at least 1")
        self.capacity = capacity
        self._entries: Deque[Coordinate] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def append(self, coordinate: Coordinate) -> None:
        with self._lock:
            if len(self._entries) == self.capacity:
                LOGGER.warning(
                    "Coordinate log at capacity %s; evicting %s", self.capacity, self._entries[0]
                )
            self._entries.append(coordinate)

    def snapshot(self) -> List[Coordinate]:
        """Return a copy of the log in insertion order."""

        with self._lock:
            return list(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


@dataclass(slots=True)
class IngestedPlan:
    """Outcome of a successful ingestion."""

    coordinate: Coordinate
    document: Dict[str, Any]
    plan_path: Path


class CoordinateIngestor:
    """Turn received coordinates into QGroundControl plan files."""

    def __init__(
        self,
        *,
        mission_directory: Optional[Path] = None,
        coordinate_log: Optional[CoordinateLog] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        if mission_directory is None:
            mission_directory = get_settings().mission_directory
        if coordinate_log is None:
            coordinate_log = CoordinateLog(get_settings().coordinate_log_capacity)
        self.mission_directory = Path(mission_directory)
        self.mission_directory.mkdir(parents=True, exist_ok=True)
        self.coordinate_log = coordinate_log
        self._clock = clock
        LOGGER.debug("Mission directory set to %s", self.mission_directory)

    def ingest(self, coordinate: Coordinate) -> IngestedPlan:
        """Record the coordinate and persist a plan flying to it."""

        validate_coordinate(coordinate)
        self.coordinate_log.append(coordinate)
        LOGGER.info(
            "Received coordinate lat=%s lon=%s", coordinate.latitude, coordinate.longitude
        )
        document = encode_plan(coordinate)
        plan_path = self._write_plan(serialise_plan(document))
        LOGGER.info("Mission plan saved to %s", plan_path)
        return IngestedPlan(coordinate=coordinate, document=document, plan_path=plan_path)

    def list_all(self) -> List[Coordinate]:
        """Return every retained coordinate in the order it was received."""

        coordinates = self.coordinate_log.snapshot()
        LOGGER.debug("Listing %s received coordinates", len(coordinates))
        return coordinates

    def _write_plan(self, content: str) -> Path:
        stem = plan_file_stem(self._clock())
        for attempt in range(1, _MAX_NAME_ATTEMPTS + 1):
            name = stem if attempt == 1 else f"{stem}_{attempt}"
            plan_path = self.mission_directory / f"{name}{PLAN_SUFFIX}"
            try:
                plan_file = plan_path.open("x", encoding="utf-8")
            except FileExistsError:
                LOGGER.debug("Plan file %s already exists; trying next suffix", plan_path)
                continue
            except OSError as error:
                LOGGER.exception("Unable to create plan file %s", plan_path)
                raise PlanPersistenceError("Error saving the .plan file") from error
            try:
                with plan_file:
                    plan_file.write(content)
                    plan_file.flush()
                    os.fsync(plan_file.fileno())
            except OSError as error:
                LOGGER.exception("Error writing plan file %s", plan_path)
                plan_path.unlink(missing_ok=True)
                raise PlanPersistenceError("Error saving the .plan file") from error
            return plan_path
        LOGGER.error("Exhausted %s plan file names for %s", _MAX_NAME_ATTEMPTS, stem)
        raise PlanPersistenceError("Error saving the .plan file")
