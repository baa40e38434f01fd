import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.config import settings
from app.database import create_db_and_tables
from app.exceptions import AppError, InternalError
from app.routes import cart, health, orders

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Run DB creation ONLY in local
    if settings.env == "local":
        create_db_and_tables()
    yield

app = FastAPI(title="TECH.PK Store API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(error: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=error.status_code,
        content={"success": False, "error": error.kind, "message": error.message},
        headers=error.headers,
    )


# kinds for errors raised by the framework itself (missing bearer token, unknown route)
HTTP_ERROR_KINDS = {
    401: "unauthorized",
    403: "forbidden",
    404: "not_found",
    405: "method_not_allowed",
}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return _error_response(exc)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": HTTP_ERROR_KINDS.get(exc.status_code, "http_error"),
            "message": str(exc.detail),
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception(f"Unhandled storage error on {request.method} {request.url.path}")
    return _error_response(InternalError())


app.include_router(health.router, prefix="/api", tags=["Health"])
app.include_router(cart.router, prefix="/api/v1/cart", tags=["Cart"])
app.include_router(orders.router, prefix="/api/v1/orders", tags=["Orders"])


@app.get("/")
def root():
    return {
        "success": True,
        "message": "TECH.PK API Running",
        "version": app.version,
        "order_endpoints": [
            "/api/v1/orders", "/api/v1/orders/{order_id}",
            "/api/v1/orders/{order_id}/status", "/api/v1/orders/admin/all"
        ],
        "cart_endpoints": [
            "/api/v1/cart", "/api/v1/cart/add", "/api/v1/cart/update/{item_id}",
            "/api/v1/cart/remove/{item_id}", "/api/v1/cart/clear"
        ],
    }
