"""Mini README: FastAPI boundary for the Dronebase ground-station service.

Structure:
    * create_application - application factory wiring routes and services.
    * Request models - JSON bodies accepted by the coordinate and drone routes.
    * CaseInsensitiveResources - lets handset clients call ``/api/Drones``.

Handlers are plain functions so FastAPI runs them on its worker thread pool;
the services they call synchronise their own shared state. Every failure is
answered with a ``{"message": ...}`` body and internal details only reach the
log.
"""

from __future__ import annotations

from typing import Iterable, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field
from starlette.types import ASGIApp, Receive, Scope, Send

from ..configuration import DronebaseSettings, get_settings
from ..errors import (
    CoordinateValidationError,
    DroneNotFoundError,
    PersistenceError,
    PlanPersistenceError,
)
from ..fleet import FleetRegistry, create_session_factory
from ..ingestion import CoordinateIngestor, CoordinateLog
from ..logging_utils import configure_root_logger, get_logger
from ..mission_planning import Coordinate

LOGGER = get_logger(__name__)

RESOURCES = ("coordinates", "drones")


# Handset clients serialise PascalCase properties ({"Latitude": ...}).
class CoordinatePayload(BaseModel):
    latitude: float = Field(..., validation_alias=AliasChoices("latitude", "Latitude"))
    longitude: float = Field(..., validation_alias=AliasChoices("longitude", "Longitude"))


class DroneStatusPayload(BaseModel):
    status: str = Field(
        ...,
        validation_alias=AliasChoices("status", "Status"),
        description="Free-form operational status, e.g. 'idle'.",
    )


def normalise_resource_path(path: str, prefix: str, resources: Iterable[str]) -> str:
    """Lower-case the prefix and resource segment of ``/API/Drones/1`` style paths."""

    prefix_parts = prefix.split("/")
    parts = path.split("/")
    depth = len(prefix_parts)
    if len(parts) <= depth:
        return path
    if [part.lower() for part in parts[:depth]] != [part.lower() for part in prefix_parts]:
        return path
    if parts[depth].lower() not in resources:
        return path
    return "/".join(prefix_parts + [parts[depth].lower()] + parts[depth + 1 :])


class CaseInsensitiveResources:
    """ASGI middleware matching resource paths regardless of case."""

    def __init__(self, app: ASGIApp, *, prefix: str, resources: Iterable[str]) -> None:
        self.app = app
        self.prefix = prefix
        self.resources = frozenset(resources)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http":
            path = scope["path"]
            normalised = normalise_resource_path(path, self.prefix, self.resources)
            if normalised != path:
                scope = dict(scope, path=normalised, raw_path=normalised.encode())
        await self.app(scope, receive, send)


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def create_application(
    settings: Optional[DronebaseSettings] = None,
    *,
    ingestor: Optional[CoordinateIngestor] = None,
    registry: Optional[FleetRegistry] = None,
) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    configure_root_logger(settings.log_level)

    app = FastAPI(title="Dronebase Ground Station", version="0.1.0")
    app.add_middleware(CaseInsensitiveResources, prefix=settings.api_prefix, resources=RESOURCES)

    if ingestor is None:
        ingestor = CoordinateIngestor(
            mission_directory=settings.mission_directory,
            coordinate_log=CoordinateLog(settings.coordinate_log_capacity),
        )
    if registry is None:
        registry = FleetRegistry(create_session_factory(settings.database_url))
    app.state.ingestor = ingestor
    app.state.registry = registry

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, error: RequestValidationError) -> JSONResponse:
        LOGGER.info("Rejected malformed request to %s", request.url.path)
        return JSONResponse(
            status_code=422,
            content={"message": "Invalid request body", "errors": jsonable_encoder(error.errors())},
        )

    @app.exception_handler(PersistenceError)
    async def persistence_failed(request: Request, error: PersistenceError) -> JSONResponse:
        LOGGER.error("Persistence failure while serving %s: %s", request.url.path, error)
        return _message(500, "Storage is currently unavailable")

    @app.exception_handler(Exception)
    async def unexpected_failure(request: Request, error: Exception) -> JSONResponse:
        LOGGER.exception("Unhandled error while serving %s", request.url.path)
        return _message(500, "Internal server error")

    router = APIRouter(prefix=settings.api_prefix)

    @router.post("/coordinates")
    def post_coordinates(payload: CoordinatePayload) -> JSONResponse:
        """Store the coordinate and generate its mission plan file."""

        coordinate = Coordinate(latitude=payload.latitude, longitude=payload.longitude)
        try:
            ingested = ingestor.ingest(coordinate)
        except CoordinateValidationError as error:
            return _message(422, str(error))
        except PlanPersistenceError:
            return _message(500, "Error saving the .plan file")
        return JSONResponse(
            {
                "message": "Coordinates received and saved successfully",
                "data": ingested.coordinate.as_dict(),
                "planFilePath": str(ingested.plan_path),
                "plan": ingested.document,
            }
        )

    @router.get("/coordinates")
    def get_coordinates() -> JSONResponse:
        """Return every received coordinate in arrival order."""

        return JSONResponse([coordinate.as_dict() for coordinate in ingestor.list_all()])

    @router.post("/drones")
    def add_drone(payload: DroneStatusPayload) -> JSONResponse:
        """Register a new drone with an initial status."""

        drone = registry.add_drone(payload.status)
        return JSONResponse({"message": "Drone added successfully", "drone": drone.as_dict()})

    @router.get("/drones")
    def list_drones() -> JSONResponse:
        """Return the whole fleet."""

        return JSONResponse([drone.as_dict() for drone in registry.list_drones()])

    @router.get("/drones/{drone_id}")
    def get_drone(drone_id: int) -> JSONResponse:
        try:
            drone = registry.get_drone(drone_id)
        except DroneNotFoundError:
            return _message(404, "Drone not found")
        return JSONResponse(drone.as_dict())

    @router.put("/drones/{drone_id}")
    def update_drone_status(drone_id: int, payload: DroneStatusPayload) -> JSONResponse:
        """Replace the status of an existing drone."""

        try:
            drone = registry.update_status(drone_id, payload.status)
        except DroneNotFoundError:
            return _message(404, "Drone not found")
        return JSONResponse(
            {"message": "Drone status updated successfully", "drone": drone.as_dict()}
        )

    app.include_router(router)

    @app.get("/readyz")
    async def readiness_check() -> dict:
        return {"status": "ready"}

    LOGGER.info(
        "Application ready: plans -> %s, routes under '%s'",
        ingestor.mission_directory,
        settings.api_prefix or "/",
    )
    return app
