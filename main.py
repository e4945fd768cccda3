import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

import dishes
import orders
from config import get_settings
from database import db, load_seed_data
from errors import ApiError, MethodNotAllowedError, PathNotFoundError
from observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    if settings.seed_data_path:
        load_seed_data(db, settings.seed_data_path)
    logger.info("Restaurant Ordering API started")
    yield
    logger.info("Restaurant Ordering API shutting down")


app = FastAPI(title="Restaurant Ordering API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===================== Public Endpoints =====================
@app.get("/")
def root():
    return {"message": "Restaurant Ordering API running"}


app.include_router(dishes.router)
app.include_router(orders.router)


# ===================== Error Handlers =====================
@app.exception_handler(ApiError)
async def api_error_handler(request: Request, exc: ApiError):
    logger.warning(
        f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}",
        extra={"path": request.url.path, "method": request.method, "status": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    """Routing failures (unknown path, wrong verb) get the same error shape."""
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        error = MethodNotAllowedError(request.method, request.url.path)
    elif exc.status_code == status.HTTP_404_NOT_FOUND:
        error = PathNotFoundError(request.url.path)
    else:
        error = ApiError(str(exc.detail), exc.status_code)
    response = await api_error_handler(request, error)
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(
        f"Validation error on {request.url.path}: {exc.errors()}",
        extra={"path": request.url.path, "method": request.method, "status": 400},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Request body must be a JSON object with a 'data' object"},
    )


@app.exception_handler(Exception)
async def generic_error_handler(request: Request, exc: Exception):
    """Catch-all; never leaks internal details."""
    logger.error(f"Unhandled exception on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "An unexpected error occurred"},
    )


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.host, port=settings.port)
