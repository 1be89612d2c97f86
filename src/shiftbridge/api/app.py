"""FastAPI application with lifespan and router mounting."""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from shiftbridge.api.routes import health, imports, mappings
from shiftbridge.core.config import AppSettings
from shiftbridge.core.exceptions import (
    FileUnreadable,
    InvalidPayload,
    MappingIncomplete,
    MappingNotFoundError,
    ShiftBridgeError,
)
from shiftbridge.core.logging import setup_logging
from shiftbridge.persistence import create_persistence
from shiftbridge.services.importer import ScheduleImporter
from shiftbridge.services.mapping_store import MappingDefinitionStore


class AppServices:
    """Services shared by all requests, injected at construction time."""

    def __init__(
        self,
        *,
        settings: AppSettings,
        mapping_store: MappingDefinitionStore,
        importer: ScheduleImporter,
    ) -> None:
        self.settings = settings
        self.mapping_store = mapping_store
        self.importer = importer

    @classmethod
    def from_settings(cls, settings: AppSettings) -> AppServices:
        repository, sink, file_store = create_persistence(settings)
        return cls(
            settings=settings,
            mapping_store=MappingDefinitionStore(repository),
            importer=ScheduleImporter(sink=sink, file_store=file_store, config=settings.imports),
        )


def create_app(services: AppServices | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``services`` replaces the settings-driven wiring (tests pass memory backends).
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        wired = services or AppServices.from_settings(AppSettings())
        setup_logging(wired.settings.log_level)
        app.state.services = wired
        yield

    app = FastAPI(
        title="shiftbridge schedule import",
        version="0.1.0",
        lifespan=lifespan,
    )
    _register_error_handlers(app)
    app.include_router(health.router)
    app.include_router(mappings.router)
    app.include_router(imports.router)
    return app


ERROR_STATUS: dict[type[ShiftBridgeError], int] = {
    FileUnreadable: 400,
    InvalidPayload: 400,
    MappingNotFoundError: 404,
    MappingIncomplete: 422,
}


def _register_error_handlers(app: FastAPI) -> None:
    async def handle(request: Request, exc: ShiftBridgeError) -> JSONResponse:
        status_code = ERROR_STATUS.get(type(exc), 502)
        body: dict = {"detail": str(exc)}
        if isinstance(exc, MappingIncomplete):
            body["missing"] = list(exc.missing)
        return JSONResponse(status_code=status_code, content=body)

    app.add_exception_handler(ShiftBridgeError, handle)
