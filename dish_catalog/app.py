from __future__ import annotations

import logging
import sys
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .catalog.data_store import DishStore
from .catalog.listing import get_dish, get_filter_options, list_dishes, list_ingredients
from .catalog.matching import find_dishes_by_ingredients
from .catalog.models import (
    Dish,
    DishListResponse,
    DishSearchResponse,
    FilterOptionsResponse,
    IngredientListResponse,
    IngredientsRequest,
    MatchResponse,
)
from .catalog.params import describe_errors, parse_list_query
from .catalog.search import search_dishes
from .config import AppConfig, load_config
from .errors import DishCatalogError, InternalError, StoreError, ValidationError

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def get_store(request: Request) -> DishStore:
    return request.app.state.store


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


# ── Dish endpoints ───────────────────────────────────────────────────────

router = APIRouter(tags=["dishes"])


@router.get("/search", response_model=DishSearchResponse)
def search(
    q: Optional[str] = Query(default=None, description="Free-text search query"),
    store: DishStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> dict:
    if not q or not q.strip():
        raise ValidationError("Search query is required")
    return search_dishes(store, q.strip(), limit=config.search_limit)


@router.get("/filter-options", response_model=FilterOptionsResponse)
def filter_options(store: DishStore = Depends(get_store)) -> dict:
    return get_filter_options(store)


@router.post("/by-ingredients", response_model=MatchResponse)
def by_ingredients(
    body: IngredientsRequest,
    store: DishStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> MatchResponse:
    if not body.ingredients:
        raise ValidationError("Please provide a non-empty array of ingredients")

    results = find_dishes_by_ingredients(store, body.ingredients, limit=config.match_limit)
    return MatchResponse(count=len(results), data=results)


@router.get("/ingredients", response_model=IngredientListResponse)
def ingredients(store: DishStore = Depends(get_store)) -> dict:
    return list_ingredients(store)


@router.get("", response_model=DishListResponse)
def dishes(
    page: Optional[str] = Query(default=None),
    limit: Optional[str] = Query(default=None),
    sort_by: Optional[str] = Query(default=None, alias="sortBy"),
    order: Optional[str] = Query(default=None, description="asc or desc"),
    diet: Optional[str] = Query(default=None),
    course: Optional[str] = Query(default=None, description='JSON array, e.g. ["dessert"]'),
    flavor_profile: Optional[str] = Query(default=None, description='JSON array, e.g. ["sweet"]'),
    store: DishStore = Depends(get_store),
    config: AppConfig = Depends(get_config),
) -> dict:
    query = parse_list_query(
        page=page,
        limit=limit,
        sort_by=sort_by,
        order=order,
        diet=diet,
        course=course,
        flavor_profile=flavor_profile,
        max_limit=config.max_page_size,
        default_limit=config.default_page_size,
    )
    return list_dishes(store, query)


@router.get("/{dish_id}", response_model=Dish)
def dish_detail(dish_id: str, store: DishStore = Depends(get_store)) -> dict:
    return get_dish(store, dish_id)


# ── App factory ──────────────────────────────────────────────────────────


def _configure_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def _error_body(message: str) -> dict:
    return {"success": False, "message": message}


def create_app(config: AppConfig | None = None, store: DishStore | None = None) -> FastAPI:
    config = config or load_config()
    store = store or DishStore.from_config(config)
    _configure_logging(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "Starting Dish Catalog API on %s:%s in %s mode",
            config.host, config.port, config.environment,
        )
        try:
            logger.info("Catalog ready with %d dishes", app.state.store.count())
        except StoreError:
            logger.error("Dish catalog unavailable at startup", exc_info=True)
        yield
        logger.info("Shutting down Dish Catalog API")

    app = FastAPI(title="Dish Catalog API", version=VERSION, lifespan=lifespan)
    app.state.config = config
    app.state.store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(config.cors_origins),
        allow_methods=list(config.cors_methods),
        allow_headers=list(config.cors_headers),
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        """Tag each request with an id for log correlation."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    @app.exception_handler(DishCatalogError)
    async def catalog_error_handler(request: Request, exc: DishCatalogError):
        request_id = getattr(request.state, "request_id", "unknown")
        if exc.status_code >= 500:
            logger.error("[%s] %s", request_id, exc.message, exc_info=exc)
        else:
            logger.info("[%s] %s %s -> %d: %s", request_id, request.method,
                        request.url.path, exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content=_error_body(exc.response_message))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = describe_errors(exc.errors(), "Invalid request")
        return JSONResponse(status_code=400, content=_error_body(message))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        request_id = getattr(request.state, "request_id", "unknown")
        logger.error("[%s] Unhandled exception: %s", request_id, exc, exc_info=exc)
        error = InternalError(str(exc))
        # Runs outside the request-id middleware, so set the header here
        return JSONResponse(
            status_code=error.status_code,
            content=_error_body(error.response_message),
            headers={"X-Request-ID": request_id},
        )

    app.include_router(router, prefix=config.dishes_prefix)

    @app.get("/")
    def root() -> dict:
        return {
            "message": "Welcome to the Dish Catalog API",
            "version": config.api_version,
            "environment": config.environment,
        }

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()
