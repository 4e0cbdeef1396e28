import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import Settings, get_settings
from .core.layered_config import ConfigError
from .core.request_context import RequestContext
from .core.responses import ErrorCodes, error_response, success_response
from .dispatch import ActionNotFound, HandlerNotFound, dispatch
from .registry import router as registry_router
from .routing import RouteTableError
from .services import StorefrontServices, build_services, get_services
from .tenancy import ShopNotFound


logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    services: Optional[StorefrontServices] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        if getattr(app.state, "services", None) is None:
            app.state.services = build_services(settings)

        problems = app.state.services.validate_route_tables()
        for problem in problems:
            logger.error(f"Route table check failed: {problem}")
        if problems and settings.strict_route_validation:
            raise RuntimeError(f"{len(problems)} shop(s) have unusable route tables")
        yield

    app = FastAPI(title="Storefront Routing Backend", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list or ["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)
    app.include_router(registry_router)
    app.add_api_route("/{path:path}", handle_page, methods=["GET"], include_in_schema=False)
    return app


# ────────────────────────────────────────────────────────────────
# Error translation
# ────────────────────────────────────────────────────────────────

def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(ShopNotFound)
    async def shop_not_found(request: Request, exc: ShopNotFound):
        logger.info(f"Shop not found for host {request.headers.get('host')!r}: {exc.message}")
        details = {key: value for key, value in (("domain", exc.domain), ("text_id", exc.text_id)) if value}
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error_response(ErrorCodes.SHOP_NOT_FOUND, exc.message, details or None),
        )

    @app.exception_handler(RouteTableError)
    async def route_table_error(request: Request, exc: RouteTableError):
        logger.error(f"Route table error for shop '{exc.text_id}': {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response(
                ErrorCodes.ROUTE_TABLE_MISSING,
                "Routing is not configured for this shop.",
                {"text_id": exc.text_id},
            ),
        )

    @app.exception_handler(ConfigError)
    async def config_error(request: Request, exc: ConfigError):
        logger.error(f"Configuration error: {exc.message}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_response(ErrorCodes.CONFIG_ERROR, "Shop configuration could not be loaded."),
        )

    @app.exception_handler(HandlerNotFound)
    @app.exception_handler(ActionNotFound)
    async def handler_not_found(request: Request, exc: Exception):
        logger.warning(f"Dispatch failed for {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error_response(ErrorCodes.HANDLER_NOT_FOUND, str(exc)),
        )


# ────────────────────────────────────────────────────────────────
# Page dispatch
# ────────────────────────────────────────────────────────────────

async def handle_page(
    request: Request,
    path: str,
    services: StorefrontServices = Depends(get_services),
):
    shop = await services.resolver.resolve_from_host(request.headers.get("host", ""))
    shop_router = services.routers.get_router(shop.text_id)

    raw_path = request.scope.get("raw_path")
    # Some servers include the query string in raw_path
    url_path = raw_path.decode("utf-8", errors="replace").split("?", 1)[0] if raw_path else request.url.path
    target = f"{url_path}?{request.url.query}" if request.url.query else url_path

    match = shop_router.match(target)
    if match is None:
        return JSONResponse(
            status_code=status.HTTP_404_NOT_FOUND,
            content=error_response(
                ErrorCodes.ROUTE_NOT_FOUND,
                "Page not found.",
                {"path": url_path, "shop": shop.text_id},
            ),
        )

    ctx = RequestContext(
        shop=shop,
        language=match.language,
        router=shop_router,
        match=match,
        path=url_path,
    )
    result = await dispatch(services.handlers, ctx)
    return success_response(
        {
            "handler": match.handler,
            "action": match.action,
            "language": match.language,
            "params": match.params,
            "content": result,
        }
    )


app = create_app()
