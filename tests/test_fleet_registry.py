"""Mini README: Tests for the persistent drone fleet registry.

Ensures identifiers are assigned by storage, status updates replace the
stored value, and unknown identifiers leave the fleet untouched.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

import pytest

from dronebase.errors import DroneNotFoundError
from dronebase.fleet import DroneRecord, FleetRegistry, create_session_factory


def test_add_drone_assigns_sequential_ids(registry: FleetRegistry) -> None:
    first = registry.add_drone("idle")
    second = registry.add_drone("charging")

    assert first == DroneRecord(id=1, status="idle")
    assert second == DroneRecord(id=2, status="charging")
    assert registry.list_drones() == [first, second]


def test_update_status_replaces_value(registry: FleetRegistry) -> None:
    drone = registry.add_drone("idle")

    updated = registry.update_status(drone.id, "in flight")

    assert updated == DroneRecord(id=drone.id, status="in flight")
    assert registry.get_drone(drone.id).status == "in flight"


def test_update_unknown_drone_leaves_registry_unchanged(registry: FleetRegistry) -> None:
    registry.add_drone("idle")
    before = registry.list_drones()

    with pytest.raises(DroneNotFoundError) as excinfo:
        registry.update_status(999, "lost")

    assert excinfo.value.drone_id == 999
    assert "not found" in str(excinfo.value)
    assert registry.list_drones() == before


def test_get_unknown_drone_raises_key_error(registry: FleetRegistry) -> None:
    with pytest.raises(KeyError):
        registry.get_drone(42)


def test_registry_persists_between_instances(tmp_path: Path) -> None:
    database_url = f"sqlite:///{tmp_path / 'fleet.db'}"
    FleetRegistry(create_session_factory(database_url)).add_drone("maintenance")

    reopened = FleetRegistry(create_session_factory(database_url))

    assert reopened.list_drones() == [DroneRecord(id=1, status="maintenance")]


def test_concurrent_updates_are_not_lost(registry: FleetRegistry) -> None:
    drones = [registry.add_drone("idle") for _ in range(6)]

    with ThreadPoolExecutor(max_workers=6) as pool:
        list(pool.map(lambda drone: registry.update_status(drone.id, f"mission-{drone.id}"), drones))

    assert registry.list_drones() == [
        DroneRecord(id=drone.id, status=f"mission-{drone.id}") for drone in drones
    ]


@pytest.mark.parametrize("drone_id", [0, -1, 2**63, 10**20])
def test_unstorable_ids_are_not_found(registry: FleetRegistry, drone_id: int) -> None:
    registry.add_drone("idle")

    with pytest.raises(DroneNotFoundError):
        registry.update_status(drone_id, "lost")
    with pytest.raises(DroneNotFoundError):
        registry.get_drone(drone_id)

    assert registry.list_drones() == [DroneRecord(id=1, status="idle")]
