from dotenv import load_dotenv
load_dotenv()
import logging
import uuid
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from snapserve.core.config import settings
from snapserve.core.exceptions import SnapServeError, StorageError
from snapserve.core.rate_limit import limiter
from snapserve.api import router as api_router
from snapserve import __version__

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger("snapserve")

app = FastAPI(
    title="SnapServe Backend",
    version=__version__
)

# Add rate limiter to app state
app.state.limiter = limiter


@app.middleware("http")
async def attach_request_id(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex
    request.state.request_id = request_id
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _request_id(request: Request):
    return getattr(request.state, "request_id", None)


@app.exception_handler(RateLimitExceeded)
async def custom_rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "detail": "Too many requests. Please wait a few minutes before trying again.",
            "code": "RATE_LIMITED",
        }
    )


@app.exception_handler(SnapServeError)
async def domain_error_handler(request: Request, exc: SnapServeError):
    content = {"detail": exc.message, "code": exc.code}
    if isinstance(exc, StorageError):
        content["correlation_id"] = exc.correlation_id or _request_id(request)
        logger.error("Storage error [%s]: %s", content["correlation_id"], exc.message)
    return JSONResponse(status_code=exc.status_code, content=content)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": "Validation failed",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors(), custom_encoder={Exception: str}),
        }
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    request_id = _request_id(request)
    logger.error("Database error [%s]", request_id, exc_info=exc)
    error = StorageError(correlation_id=request_id)
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.message, "code": error.code, "correlation_id": request_id},
    )


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Tables are managed by Alembic migrations
app.include_router(api_router, prefix="/api")


@app.get("/")
def root():
    return {
        "message": "SnapServe backend running",
        "version": __version__
    }
