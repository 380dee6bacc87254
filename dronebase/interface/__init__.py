"""Mini README: HTTP interface for Dronebase.

Exports the FastAPI application factory serving the coordinate and drone
routes consumed by handset and ground-station clients.
"""

from .web_app import create_application

__all__ = ["create_application"]
