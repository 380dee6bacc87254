"""Mini README: Coordinate ingestion helpers for Dronebase.

Convenience exports for receiving waypoints from ground-station clients and
turning them into mission plan files.
"""

from .coordinate_ingestor import CoordinateIngestor, CoordinateLog, IngestedPlan, validate_coordinate

__all__ = ["CoordinateIngestor", "CoordinateLog", "IngestedPlan", "validate_coordinate"]
