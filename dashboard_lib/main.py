"""Application factory for the dashboard FastAPI app.

This module exposes `create_app(config: Config) -> FastAPI` which performs
all setup (logging, config loading, catalog composition, middleware and
router registration) so tests can construct isolated apps.

    from dashboard_lib.main import create_app, Config
    app = create_app(Config())
"""
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging

from fastapi import FastAPI, Request
from fastapi.responses import FileResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from dashboard_lib.catalog import CatalogService
from dashboard_lib.config import DashboardConfig, YamlConfigStore, DEFAULT_CONFIG_PATH
from dashboard_lib.logging_config import configure_logging
from dashboard_lib.notifications import NotificationCenter
from dashboard_lib.services import ServiceContainer, resolve_service
from dashboard_lib.storage import ExpiringStore, create_storage


@dataclass
class Config:
    config_path: str = str(DEFAULT_CONFIG_PATH)
    # Overrides for values otherwise read from the YAML configuration
    services_file: Optional[str] = None
    storage_file: Optional[str] = None
    www_dir: Optional[str] = None
    log_level: Optional[str] = None
    enable_request_logging: bool = True


def _load_dashboard_config(path: Path, logger: logging.Logger) -> DashboardConfig:
    try:
        return YamlConfigStore(path).load_or_default()
    except ValueError as e:
        logger.error("Invalid dashboard configuration %s: %s; using defaults", path, e)
        return DashboardConfig()


def _load_catalog(path: Path, logger: logging.Logger) -> CatalogService:
    try:
        return CatalogService.from_file(path)
    except FileNotFoundError:
        logger.error("Services catalog %s not found; serving an empty catalog", path)
    except (ValueError, KeyError) as e:
        logger.error("Invalid services catalog %s: %s; serving an empty catalog", path, e)
    return CatalogService([])


def create_app(config: Config) -> FastAPI:
    """Create and return a configured FastAPI application."""
    config_path = Path(config.config_path)
    logger = configure_logging(config_path, level=config.log_level)

    dashboard_cfg = _load_dashboard_config(config_path, logger)
    services_file = Path(config.services_file or dashboard_cfg.services_file)
    www_dir = Path(config.www_dir or dashboard_cfg.www_dir)
    catalog = _load_catalog(services_file, logger)

    container = ServiceContainer()
    container.register_singleton("dashboard_config", dashboard_cfg)
    container.register_singleton("catalog_service", catalog)

    notifications = NotificationCenter(timeout=dashboard_cfg.store.notification_timeout)
    container.register_singleton("notification_center", notifications)

    # The storage file is only opened when something first asks for the store.
    storage_file = config.storage_file or dashboard_cfg.storage_file

    def _make_store() -> ExpiringStore:
        backend = create_storage("file", file_path=storage_file)
        logger.info("Using storage file %s", storage_file)
        return ExpiringStore(backend, dashboard_cfg.store, notifier=notifications)

    container.register_factory("store", _make_store)

    app = FastAPI(title=dashboard_cfg.app_name, version=dashboard_cfg.version)
    app.state.container = container

    if config.enable_request_logging:
        from dashboard_lib.middleware import RequestLogging
        app.add_middleware(RequestLogging)

    @app.get("/")
    async def root():
        index = www_dir / "index.html"
        if not index.exists():
            raise StarletteHTTPException(status_code=404)
        return FileResponse(index)

    @app.get("/config/services.json")
    async def services_json(request: Request):
        return resolve_service(request, "catalog_service").to_dict()

    if www_dir.is_dir():
        app.mount("/static", StaticFiles(directory=str(www_dir)), name="static")
    else:
        logger.warning("Static directory %s not found; /static is disabled", www_dir)

    @app.exception_handler(StarletteHTTPException)
    async def starlette_http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404 and not request.url.path.startswith("/api/"):
            return PlainTextResponse("Resource not found", status_code=404)
        from fastapi.exception_handlers import http_exception_handler
        return await http_exception_handler(request, exc)

    from dashboard_lib.server.api import router as server_router
    from dashboard_lib.catalog.api import router as catalog_router

    app.include_router(server_router, prefix='/api')
    app.include_router(catalog_router, prefix='/api')

    return app
