"""Mini README: Core package initializer for the Dronebase ground-station service.

This module exposes convenience imports that allow other parts of the
application to access high-level services without needing to know the
exact module structure. The file is intentionally lightweight so that
importing the package never opens database connections or touches the
mission directory.
"""

from .logging_utils import get_logger

__all__ = ["get_logger"]
