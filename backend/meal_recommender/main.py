"""
Meal Recommendations - Main FastAPI Application

Personalised recipe recommendations for the meal-planning backend:
- Time-decay scoring from each user's cooking history
- Preference scoring from each user's favourite categories
- Hybrid ranking combining both
- Cooking history and preference management
- Best-effort recommendation log for analytics
"""

import time
import uuid

import structlog
from fastapi import FastAPI, status, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings
from .api import api_router
from .errors import RecommenderError
from .utils.database import init_db
from .utils.logging import setup_logging, get_logger, configure_uvicorn_logging
from .utils.metrics import setup_metrics

# Setup structured logging
setup_logging(
    log_level=settings.LOG_LEVEL,
    log_format=settings.LOG_FORMAT,
    log_file=settings.LOG_FILE,
    service_name=settings.SERVICE_NAME
)
configure_uvicorn_logging(settings.SERVICE_NAME)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""

    # Startup
    logger.info("Starting recommendations service", version=settings.VERSION, port=settings.RECOMMENDATIONS_PORT)

    logger.info("Initializing database")
    init_db()

    logger.info("Recommendations service started successfully")

    yield

    # Shutdown
    logger.info("Shutting down recommendations service")


# Create FastAPI application
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="""
    # Meal Recommendations API

    Personalised recipe recommendations from cooking history and category preferences.

    ## Algorithms

    - `preference`: recipes from the user's preferred categories (random picks when none match)
    - `time_decay`: favours recipes the user has not cooked for a while
    - `hybrid`: 0.6 x time score + 0.4 x preference score (default)

    All endpoints except `/health` expect `Authorization: Bearer <token>`; the token
    is verified by the gateway and only decoded here.
    """,
    lifespan=lifespan,
    openapi_tags=[
        {"name": "recommendations", "description": "Personalised recipe recommendations"},
        {"name": "preferences", "description": "Preferred recipe categories"},
        {"name": "cooking", "description": "Cooking history tracking"},
    ]
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Setup Prometheus metrics
setup_metrics(app)

# Include routers
app.include_router(api_router)


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "code": status_code, "message": message},
    )


@app.exception_handler(RecommenderError)
async def recommender_error_handler(request: Request, exc: RecommenderError):
    if exc.status_code >= 500:
        logger.error("Request failed", error=exc.error, message=exc.message, path=request.url.path)
    return error_response(exc.status_code, exc.error, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    logger.info("Invalid request", path=request.url.path, errors=len(errors))
    in_body = any((error.get("loc") or ("",))[0] == "body" for error in errors)
    message = "Invalid JSON" if in_body else "Invalid request parameters"
    return error_response(status.HTTP_400_BAD_REQUEST, "invalid_request", message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return error_response(exc.status_code, "http_error", str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", path=request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "internal_error", "Internal server error")


# Middleware for logging requests
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with a request id"""
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)

    start = time.time()
    logger.info(
        "Incoming request",
        method=request.method,
        uri=str(request.url.path),
        client=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent")
    )

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id

    logger.info(
        "Request completed",
        method=request.method,
        uri=str(request.url.path),
        status_code=response.status_code,
        duration_ms=int((time.time() - start) * 1000)
    )

    return response


@app.get("/health", tags=["root"], status_code=status.HTTP_200_OK)
def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "recommendations"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=settings.RECOMMENDATIONS_PORT
    )
