"""Mini README: Tests for the QGroundControl plan encoder.

Validates the document layout, determinism, and the JSON text round trip
used when plans are written to and read back from disk.
"""

from __future__ import annotations

import pytest

from dronebase.mission_planning import Coordinate, encode_plan, parse_plan, serialise_plan


@pytest.mark.parametrize(
    "latitude, longitude",
    [(55.751244, 37.618423), (-33.8688, 151.2093), (0.0, 0.0), (90.0, -180.0)],
)
def test_waypoint_and_home_position_match_coordinate(latitude: float, longitude: float) -> None:
    document = encode_plan(Coordinate(latitude=latitude, longitude=longitude))

    mission = document["mission"]
    assert len(mission["items"]) == 1
    assert mission["items"][0]["coordinate"] == [latitude, longitude, 50.0]
    assert mission["plannedHomePosition"] == [latitude, longitude, 50.0]


def test_document_sections_follow_plan_format() -> None:
    document = encode_plan(Coordinate(latitude=10.0, longitude=20.0))

    assert list(document) == ["fileType", "groundStation", "geoFence", "mission", "rallyPoints", "version"]
    assert document["fileType"] == "Plan"
    assert document["groundStation"] == "QGroundControl"
    assert document["version"] == 1
    assert document["geoFence"] == {"circles": [], "polygons": [], "version": 2}
    assert document["rallyPoints"] == {"points": [], "version": 2}

    mission = document["mission"]
    assert mission["cruiseSpeed"] == pytest.approx(5.0)
    assert mission["hoverSpeed"] == pytest.approx(3.0)
    assert mission["firmwareType"] == 3
    assert mission["vehicleType"] == 2
    assert mission["version"] == 2

    item = mission["items"][0]
    assert item["command"] == 22
    assert item["frame"] == 3
    assert item["type"] == "SimpleItem"
    assert item["autoContinue"] is True
    assert [item[f"param{index}"] for index in range(1, 5)] == [0.0, 0.0, 0.0, 0.0]


def test_encoding_is_deterministic() -> None:
    coordinate = Coordinate(latitude=48.8584, longitude=2.2945)

    assert serialise_plan(encode_plan(coordinate)) == serialise_plan(encode_plan(coordinate))


def test_serialised_plan_parses_back_to_equal_document() -> None:
    document = encode_plan(Coordinate(latitude=-12.5, longitude=130.25))

    text = serialise_plan(document)

    assert text.startswith("{\n  \"fileType\": \"Plan\"")
    assert parse_plan(text) == document


@pytest.mark.parametrize("text", ["not json", "[]", '{"fileType": "Mission"}', '{"fileType": "Plan"}'])
def test_parse_plan_rejects_non_plan_documents(text: str) -> None:
    with pytest.raises(ValueError):
        parse_plan(text)


@pytest.mark.parametrize(
    "home",
    ["[1.0, 2.0]", "[1.0, 2.0, 3.0, 4.0]", '"north"', '[1.0, "east", 50.0]', "null"],
)
def test_parse_plan_rejects_malformed_home_position(home: str) -> None:
    text = serialise_plan(encode_plan(Coordinate(latitude=1.0, longitude=2.0))).replace(
        '"plannedHomePosition": [\n      1.0,\n      2.0,\n      50.0\n    ]',
        f'"plannedHomePosition": {home}',
    )
    assert home in text

    with pytest.raises(ValueError):
        parse_plan(text)
