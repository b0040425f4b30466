# catalog/main.py
from fastapi import APIRouter, Body, Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from typing import Optional, Dict, Any
import logging

from .config import Settings, get_settings
from .database import CatalogStore
from .errors import CorruptState, NotFound, ValidationFailed
from .models import CategoryList, ErrorOut, ProductEnvelope, ProductList
from .persistence import JsonFileStorage
from .query import set_collation
from .seed import SEED_PRODUCTS

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"
NOT_PERSISTED = "changes not persisted"

router = APIRouter(prefix="/api")

NOT_FOUND = {404: {"model": ErrorOut}}
INVALID = {400: {"model": ErrorOut}}


# ---------------------------
# Store wiring
# ---------------------------
def build_store(settings: Settings) -> CatalogStore:
    storage = JsonFileStorage(settings.data_file) if settings.data_file else None
    store = CatalogStore(storage, seed=SEED_PRODUCTS if settings.seed else [])
    try:
        store.load()
    except CorruptState as e:
        if not settings.discard_corrupt:
            raise
        logger.error("%s; discarding it and starting from the seed", e)
        store.reseed()
    return store


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def _with_warning(store: CatalogStore, body: Dict[str, Any]) -> Dict[str, Any]:
    if not store.durable:
        body["warning"] = NOT_PERSISTED
    return body


# ---------------------------
# Product endpoints
# ---------------------------
@router.get("/products", response_model=ProductList)
async def list_products(
    category: Optional[str] = None,
    min_price: Optional[str] = Query(None, alias="minPrice"),
    max_price: Optional[str] = Query(None, alias="maxPrice"),
    in_stock: Optional[str] = Query(None, alias="inStock"),
    sort: Optional[str] = None,
    limit: Optional[str] = None,
    store: CatalogStore = Depends(get_store),
):
    filters = {
        "category": category,
        "minPrice": min_price,
        "maxPrice": max_price,
        "inStock": in_stock,
        "sort": sort,
        "limit": limit,
    }
    result = store.list(filters)
    return {
        "success": True,
        "count": result.count,
        "total": result.total,
        "filters": filters,
        "data": result.items,
    }


@router.get("/products/{product_id}", response_model=ProductEnvelope, response_model_exclude_unset=True, responses=NOT_FOUND)
async def get_product(product_id: str, store: CatalogStore = Depends(get_store)):
    return {"success": True, "data": store.get(product_id)}


@router.post("/products", status_code=201, response_model=ProductEnvelope, response_model_exclude_unset=True, responses=INVALID)
async def create_product(payload: Dict[str, Any] = Body(...), store: CatalogStore = Depends(get_store)):
    product = await store.create(payload)
    return _with_warning(store, {"success": True, "data": product})


@router.put("/products/{product_id}", response_model=ProductEnvelope, response_model_exclude_unset=True, responses={**INVALID, **NOT_FOUND})
async def replace_product(product_id: str, payload: Dict[str, Any] = Body(...), store: CatalogStore = Depends(get_store)):
    product = await store.replace(product_id, payload)
    return _with_warning(store, {"success": True, "data": product})


@router.patch("/products/{product_id}", response_model=ProductEnvelope, response_model_exclude_unset=True, responses={**INVALID, **NOT_FOUND})
async def patch_product(product_id: str, payload: Dict[str, Any] = Body(...), store: CatalogStore = Depends(get_store)):
    product = await store.patch(product_id, payload)
    return _with_warning(store, {"success": True, "data": product})


@router.delete("/products/{product_id}", status_code=204, responses=NOT_FOUND)
async def delete_product(product_id: str, store: CatalogStore = Depends(get_store)):
    await store.delete(product_id)
    return Response(status_code=204)


@router.get("/categories", response_model=CategoryList)
async def list_categories(store: CatalogStore = Depends(get_store)):
    cats = store.categories()
    return {"success": True, "count": len(cats), "data": cats}


# ---------------------------
# Error envelopes
# ---------------------------
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    return JSONResponse(status_code=400, content={"error": "validation failed", "errors": exc.errors})


async def not_found_handler(request: Request, exc: NotFound):
    return JSONResponse(status_code=404, content={"error": "product not found"})


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [f"{'.'.join(str(p) for p in e.get('loc', ()))}: {e.get('msg')}" for e in exc.errors()]
    return JSONResponse(status_code=400, content={"error": "invalid request", "errors": errors})


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "route not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail).lower()}, headers=exc.headers)


async def internal_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "internal error"})


# ---------------------------
# App factory
# ---------------------------
def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.getLogger("catalog").setLevel(settings.log_level)
    set_collation(settings.collation_locale)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        store = build_store(settings)
        app.state.store = store
        try:
            yield
        finally:
            store.close()

    app = FastAPI(title="product-catalog", version=API_VERSION, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info("%s %s %s", request.method, response.status_code, request.url.path)
        return response

    app.add_exception_handler(ValidationFailed, validation_failed_handler)
    app.add_exception_handler(NotFound, not_found_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, internal_error_handler)

    @app.get("/")
    async def index():
        return {
            "success": True,
            "message": "Product catalog API",
            "version": API_VERSION,
            "endpoints": {
                "listProducts": "GET /api/products?category=&minPrice=&maxPrice=&inStock=&sort=&limit=",
                "getProduct": "GET /api/products/{id}",
                "createProduct": "POST /api/products",
                "replaceProduct": "PUT /api/products/{id}",
                "patchProduct": "PATCH /api/products/{id}",
                "deleteProduct": "DELETE /api/products/{id}",
                "listCategories": "GET /api/categories",
            },
        }

    app.include_router(router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("catalog.main:app", host="0.0.0.0", port=8085)
