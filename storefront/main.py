# storefront/main.py
import logging
import time
from contextlib import contextmanager
from typing import Optional

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from starlette.concurrency import run_in_threadpool

from . import ingestion
from .blob import LocalBlobSink, SupabaseBlobSink
from .catalog import CatalogStore
from .config import Settings
from .database import JsonFileKVStore, MemoryKVStore
from .errors import StoreError
from .identity import InMemoryIdentityProvider, SupabaseIdentityProvider
from .logging_config import setup_logging
from .models import ProductPatch, SignupIn

logger = logging.getLogger(__name__)


# ---------------------------
# Collaborator wiring
# ---------------------------
def build_store(settings: Settings) -> CatalogStore:
    if settings.store_backend == "memory":
        return CatalogStore(MemoryKVStore())
    return CatalogStore(JsonFileKVStore(settings.store_path))


def build_blob_sink(settings: Settings):
    if settings.blob_backend == "supabase":
        return SupabaseBlobSink(settings.supabase_url, settings.supabase_service_role_key, settings.supabase_bucket)
    return LocalBlobSink(settings.blob_dir, settings.blob_public_url)


def build_identity(settings: Settings):
    if settings.identity_backend == "supabase":
        return SupabaseIdentityProvider(settings.supabase_url, settings.supabase_service_role_key)
    return InMemoryIdentityProvider()


def get_store(request: Request) -> CatalogStore:
    return request.app.state.store


def get_blob_sink(request: Request):
    return request.app.state.blob_sink


def get_identity(request: Request):
    return request.app.state.identity


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@contextmanager
def failure_message(action: str, fallback: str):
    """Log errors raised inside a route; unexpected ones are re-raised as
    ``StoreError`` carrying their own message or the route's fallback."""
    try:
        yield
    except StoreError as e:
        if e.status_code >= 500:
            logger.error("Error %s: %s", action, e.message)
        raise
    except Exception as e:
        logger.exception("Error %s", action)
        raise StoreError(str(e) or fallback) from e


# ---------------------------
# Routes
# ---------------------------
# Store calls block on file IO and must stay off the event loop.
router = APIRouter()


@router.get("/health")
async def health():
    return {"status": "ok"}


@router.post("/signup")
async def signup(payload: SignupIn, identity=Depends(get_identity)):
    with failure_message("signing up", "Failed to sign up"):
        user = await identity.create_user(payload.email, payload.password, payload.name, payload.role or "user")
    logger.info("Signed up %s", payload.email)
    return {"user": user}


@router.get("/products")
def list_products(store: CatalogStore = Depends(get_store)):
    with failure_message("fetching products", "Failed to fetch products"):
        products = store.list_products()
    return {"products": products or []}


@router.post("/products")
async def add_product(request: Request, store: CatalogStore = Depends(get_store), blob_sink=Depends(get_blob_sink)):
    with failure_message("adding product", "Failed to add product"):
        data = await ingestion.normalize(request, blob_sink)
        product = await run_in_threadpool(store.create, data)
    return {"product": product}


@router.put("/products/{product_id}")
def update_product(product_id: str, patch: ProductPatch, store: CatalogStore = Depends(get_store)):
    with failure_message("updating product", "Failed to update product"):
        product = store.update(product_id, patch)
    return {"product": product}


@router.delete("/products/{product_id}")
def delete_product(product_id: str, store: CatalogStore = Depends(get_store)):
    with failure_message("deleting product", "Failed to delete product"):
        store.remove(product_id)
    return {"message": "Product deleted successfully"}


@router.post("/init-products")
def init_products(store: CatalogStore = Depends(get_store)):
    with failure_message("initializing products", "Failed to initialize products"):
        created, products = store.initialize()
    if not created:
        return {"message": "Products already initialized", "count": len(products)}
    return {"message": "Products initialized successfully", "count": len(products), "products": products}


# ---------------------------
# App factory
# ---------------------------
def create_app(
    settings: Optional[Settings] = None,
    store: Optional[CatalogStore] = None,
    blob_sink=None,
    identity=None,
) -> FastAPI:
    settings = settings or Settings()
    setup_logging(settings.log_level)

    app = FastAPI(title="poultry-paradise storefront")
    app.state.settings = settings
    app.state.store = store or build_store(settings)
    app.state.blob_sink = blob_sink or build_blob_sink(settings)
    app.state.identity = identity or build_identity(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info("%s %s -> %d (%.1fms)", request.method, request.url.path, response.status_code, elapsed_ms)
        return response

    @app.exception_handler(StoreError)
    async def store_error_handler(request: Request, exc: StoreError):
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        details = "; ".join(
            f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
        )
        return _error(400, details or "Invalid request")

    app.include_router(router, prefix=settings.api_prefix)

    if isinstance(app.state.blob_sink, LocalBlobSink):
        app.mount("/images", StaticFiles(directory=app.state.blob_sink.directory, check_dir=False), name="images")

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        return "Hello from the Poultry Paradise storefront!"

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("storefront.main:app", host="0.0.0.0", port=8085)
