"""Mini README: Shared pytest fixtures for the Dronebase test-suite.

Structure:
    * mission_directory - per-test directory receiving plan files.
    * fixed_clock - deterministic clock for predictable plan file names.
    * registry - fleet registry over an in-memory SQLite database.
    * client - FastAPI test client wired to the fixtures above.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from dronebase.configuration import DronebaseSettings
from dronebase.fleet import FleetRegistry, create_session_factory
from dronebase.ingestion import CoordinateIngestor, CoordinateLog
from dronebase.interface import create_application


@pytest.fixture
def mission_directory(tmp_path: Path) -> Path:
    directory = tmp_path / "missions"
    directory.mkdir()
    return directory


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2024, 7, 14, 9, 30, 5)


@pytest.fixture
def ingestor(mission_directory: Path) -> CoordinateIngestor:
    return CoordinateIngestor(mission_directory=mission_directory, coordinate_log=CoordinateLog(100))


@pytest.fixture
def registry() -> FleetRegistry:
    return FleetRegistry(create_session_factory("sqlite://"))


@pytest.fixture
def settings(mission_directory: Path) -> DronebaseSettings:
    return DronebaseSettings(mission_directory=mission_directory, database_url="sqlite://")


@pytest.fixture
def client(settings: DronebaseSettings, ingestor: CoordinateIngestor, registry: FleetRegistry) -> TestClient:
    app = create_application(settings, ingestor=ingestor, registry=registry)
    return TestClient(app)
