"""Mini README: Mission planning subsystem for ground-control artefacts.

Exports the coordinate model and the encoder producing QGroundControl
``.plan`` documents. Keeping the format here lets it grow (e.g. multi-waypoint
missions) without touching the ingestion path.
"""

from .plan_encoder import Coordinate, encode_plan, parse_plan, serialise_plan, waypoint_item

__all__ = ["Coordinate", "encode_plan", "parse_plan", "serialise_plan", "waypoint_item"]
