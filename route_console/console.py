"""
APISIX Route Console Service
JSON surface the console front end drives: Admin API settings and routes
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse

from . import __version__
from .apisix import (
    ApiClient,
    APISIXRoute,
    NO_CONTENT,
    ConfigurationMissing,
    RouteListPage,
    RouteManager,
    RouteValidationError,
    TransportFailure,
    UnexpectedResponseShape,
)
from .apisix.models import PAGE_SIZE_OPTIONS
from .core import ApiConfig, ConfigStore, ConsoleSettings, configure_logging

logger = logging.getLogger(__name__)


class ConsoleService:
    """Wires the config store, Admin API client and route manager together"""

    def __init__(
        self,
        settings: ConsoleSettings,
        store: Optional[ConfigStore] = None,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.settings = settings
        self.store = store or ConfigStore(settings.config_path)
        self.client = ApiClient(self.store, client=http_client)
        self.routes = RouteManager(self.client, page_size=settings.page_size)

    async def shutdown(self):
        """Cleanup resources"""
        await self.client.close()

    def page_view(self, page: RouteListPage) -> Dict[str, Any]:
        view = page.model_dump()
        view["total_pages"] = self.routes.pagination.total_pages
        view["page_size_options"] = PAGE_SIZE_OPTIONS
        return view

    def config_view(self) -> Dict[str, Any]:
        config = self.store.load()
        if config is None:
            return {"configured": False, "base_url": self.settings.default_base_url}
        return {"configured": True, **config.masked()}


def create_app(
    settings: Optional[ConsoleSettings] = None,
    store: Optional[ConfigStore] = None,
    http_client: Optional[httpx.AsyncClient] = None
) -> FastAPI:
    """Build the console application"""
    settings = settings or ConsoleSettings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        configure_logging(settings)
        app.state.console = ConsoleService(settings, store=store, http_client=http_client)
        logger.info(f"Route console started, Admin API configured: {app.state.console.store.is_configured}")
        yield
        # Shutdown
        await app.state.console.shutdown()

    app = FastAPI(
        title="APISIX Route Console",
        description="Manage APISIX routes through the Admin API",
        version=__version__,
        lifespan=lifespan
    )

    @app.exception_handler(ConfigurationMissing)
    async def configuration_missing_handler(request: Request, exc: ConfigurationMissing):
        return JSONResponse(status_code=428, content={"detail": exc.message})

    @app.exception_handler(TransportFailure)
    async def transport_failure_handler(request: Request, exc: TransportFailure):
        status = exc.status if exc.status and 400 <= exc.status < 500 else 502
        return JSONResponse(status_code=status, content={"detail": exc.message})

    @app.exception_handler(UnexpectedResponseShape)
    async def unexpected_shape_handler(request: Request, exc: UnexpectedResponseShape):
        return JSONResponse(status_code=502, content={"detail": exc.message})

    @app.exception_handler(RouteValidationError)
    async def route_validation_handler(request: Request, exc: RouteValidationError):
        return JSONResponse(status_code=422, content={"detail": exc.message})

    def console(request: Request) -> ConsoleService:
        return request.app.state.console

    @app.get("/health")
    async def health_check(request: Request):
        """Health check endpoint"""
        admin = await console(request).client.health_check()
        return {"status": "healthy", "service": "route-console", "admin_api": admin}

    # Admin API settings

    @app.get("/config")
    async def get_config(request: Request):
        return console(request).config_view()

    @app.put("/config")
    async def save_config(request: Request):
        """Save the Admin API base URL and key"""
        try:
            config = ApiConfig.model_validate(await request.json())
        except ValueError as e:
            raise HTTPException(status_code=422, detail="Please fill in both Base URL and API Key.") from e
        service = console(request)
        service.store.save(config)
        return service.config_view()

    # Routes

    @app.get("/routes")
    async def list_routes(
        request: Request,
        page: Optional[int] = Query(default=None),
        page_size: Optional[int] = Query(default=None, ge=1)
    ):
        manager = console(request).routes
        if page is None and page_size is not None and page_size != manager.pagination.page_size:
            result = await manager.set_page_size(page_size)
        else:
            result = await manager.list_routes(page, page_size)
        return console(request).page_view(result)

    @app.post("/routes/next")
    async def next_page(request: Request):
        result = await console(request).routes.next_page()
        return console(request).page_view(result)

    @app.post("/routes/previous")
    async def previous_page(request: Request):
        result = await console(request).routes.previous_page()
        return console(request).page_view(result)

    @app.get("/routes/new")
    async def new_route(request: Request):
        """Blank route for the create form"""
        return console(request).routes.new_route().model_dump()

    @app.get("/routes/{route_id}")
    async def get_route(request: Request, route_id: str):
        route = await console(request).routes.get_route(route_id)
        return route.model_dump()

    @app.post("/routes", status_code=201)
    async def create_route(request: Request, route: APISIXRoute):
        result = await console(request).routes.create_route(route)
        return None if result is NO_CONTENT else result

    @app.put("/routes/{route_id}")
    async def update_route(request: Request, route_id: str, route: APISIXRoute):
        result = await console(request).routes.update_route(route_id, route)
        return None if result is NO_CONTENT else result

    @app.delete("/routes/{route_id}", status_code=204)
    async def delete_route(request: Request, route_id: str):
        await console(request).routes.delete_route(route_id)

    # Delete confirmation

    def delete_view(service: ConsoleService) -> Dict[str, Any]:
        state = service.routes.deletion.state
        return {**state.model_dump(mode="json"), **state.describe()}

    @app.get("/delete")
    async def delete_state(request: Request):
        return delete_view(console(request))

    @app.post("/routes/{route_id}/delete-request")
    async def request_delete(request: Request, route_id: str):
        """Open the confirmation dialog for a route"""
        manager = console(request).routes
        route = next((node.value for node in manager.items if node.value.id == route_id), None)
        if route is None:
            route = await manager.get_route(route_id)
        manager.request_delete(route)
        return delete_view(console(request))

    @app.post("/delete/confirm")
    async def confirm_delete(request: Request):
        service = console(request)
        await service.routes.confirm_delete()
        view = delete_view(service)
        view["page"] = service.page_view(service.routes.current_page())
        return view

    @app.post("/delete/cancel")
    async def cancel_delete(request: Request):
        service = console(request)
        if not service.routes.cancel_delete():
            raise HTTPException(status_code=409, detail="A delete is in progress.")
        return delete_view(service)

    return app


app = create_app()
