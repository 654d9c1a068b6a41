"""Main FastAPI application."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, ORJSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from injurylog import __version__
from injurylog.config import settings
from injurylog.errors import ConflictError, LogFormatError, StorageError
from injurylog.routes import actions, config, health, log
from injurylog.app_logging import setup_logging, get_logger

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Injury Log API - Environment: {settings.ENVIRONMENT}, storage: {settings.STORAGE_BACKEND}")
    yield
    logger.info("Shutting down Injury Log API")


app = FastAPI(
    title="Injury Log API",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str, error_type: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"message": message, "type": error_type, **extra}},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, exc.detail, "http_error")


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return _error(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "Validation error",
        "validation_error",
        details=jsonable_encoder(exc.errors()),
    )


@app.exception_handler(ConflictError)
async def conflict_exception_handler(request: Request, exc: ConflictError):
    logger.warning(f"Write conflict on {exc.path}: {request.method} {request.url.path}")
    return _error(status.HTTP_409_CONFLICT, str(exc), "conflict")


@app.exception_handler(LogFormatError)
async def format_exception_handler(request: Request, exc: LogFormatError):
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, str(exc), "format_error")


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error(f"Storage error: {exc}")
    return _error(status.HTTP_502_BAD_GATEWAY, str(exc), "storage_error")


app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(log.router, prefix="/api/log", tags=["log"])
app.include_router(config.router, prefix="/api/config", tags=["config"])
app.include_router(actions.router, prefix="/api/actions", tags=["actions"])


@app.get("/")
async def root():
    return {"message": "Injury Log API", "documentation": "/docs"}
