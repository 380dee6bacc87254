"""Mini README: QGroundControl mission plan encoding.

Structure:
    * Coordinate - immutable latitude/longitude pair received from clients.
    * waypoint_item - builds a single "fly to" mission item.
    * encode_plan - converts a coordinate into a complete ``.plan`` document.
    * serialise_plan / parse_plan - JSON text conversion for plan files.

The encoder is pure: it never reads the clock or touches the filesystem, so
the document format can be tested independently of where plans are stored.
Geofence and rally point sections are always emitted empty.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Dict, List

PLAN_FILE_TYPE = "Plan"
GROUND_STATION = "QGroundControl"
PLAN_VERSION = 1
SECTION_VERSION = 2

DEFAULT_ALTITUDE = 50.0
CRUISE_SPEED = 5.0
HOVER_SPEED = 3.0

# MAVLink enum values understood by QGroundControl.
MAV_CMD_NAV_WAYPOINT = 22
MAV_FRAME_GLOBAL_RELATIVE_ALT = 3
MAV_AUTOPILOT_ARDUPILOTMEGA = 3
MAV_TYPE_QUADROTOR = 2


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Ground position in decimal degrees."""

    latitude: float
    longitude: float

    def as_dict(self) -> Dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}

    def position(self, altitude: float = DEFAULT_ALTITUDE) -> List[float]:
        """Return the ``[lat, lon, alt]`` triple used throughout plan files."""

        return [self.latitude, self.longitude, altitude]


def waypoint_item(coordinate: Coordinate, altitude: float = DEFAULT_ALTITUDE) -> Dict[str, Any]:
    """Build a simple waypoint item with zeroed command parameters."""

    return {
        "autoContinue": True,
        "command": MAV_CMD_NAV_WAYPOINT,
        "frame": MAV_FRAME_GLOBAL_RELATIVE_ALT,
        "param1": 0.0,
        "param2": 0.0,
        "param3": 0.0,
        "param4": 0.0,
        "type": "SimpleItem",
        "coordinate": coordinate.position(altitude),
    }


def encode_plan(coordinate: Coordinate) -> Dict[str, Any]:
    """Return a mission plan flying to ``coordinate`` with home set to the same point."""

    return {
        "fileType": PLAN_FILE_TYPE,
        "groundStation": GROUND_STATION,
        "geoFence": {
            "circles": [],
            "polygons": [],
            "version": SECTION_VERSION,
        },
        "mission": {
            "cruiseSpeed": CRUISE_SPEED,
            "hoverSpeed": HOVER_SPEED,
            "firmwareType": MAV_AUTOPILOT_ARDUPILOTMEGA,
            "items": [waypoint_item(coordinate)],
            "plannedHomePosition": coordinate.position(),
            "vehicleType": MAV_TYPE_QUADROTOR,
            "version": SECTION_VERSION,
        },
        "rallyPoints": {
            "points": [],
            "version": SECTION_VERSION,
        },
        "version": PLAN_VERSION,
    }


def serialise_plan(document: Dict[str, Any]) -> str:
    """Render a plan document as indented JSON, preserving key order."""

    return json.dumps(document, indent=2, ensure_ascii=False)


def parse_plan(text: str) -> Dict[str, Any]:
    """Parse plan file contents, rejecting anything that is not a plan document."""

    try:
        document = json.loads(text)
    except json.JSONDecodeError as error:
        raise ValueError("Plan file is not valid JSON") from error

    if not isinstance(document, dict) or document.get("fileType") != PLAN_FILE_TYPE:
        raise ValueError("Document is not a QGroundControl plan")
    mission = document.get("mission")
    if not isinstance(mission, dict):
        raise ValueError("Plan document has no mission section")
    if not isinstance(mission.get("items", []), list):
        raise ValueError("Mission items must be a list")
    home = mission.get("plannedHomePosition")
    if not (
        isinstance(home, list)
        and len(home) == 3
        and all(isinstance(value, (int, float)) and not isinstance(value, bool) for value in home)
    ):
        raise ValueError("plannedHomePosition must be [latitude, longitude, altitude]")
    return document
