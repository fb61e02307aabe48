"""Event Planner web application."""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventhub.core.config import settings
from eventhub.core.database import create_db_and_tables
from eventhub.core.errors import DomainError, ErrorCode
from eventhub.core.scheduler import shutdown_scheduler, start_scheduler
from eventhub.models import EVENT_CATEGORIES
from eventhub.routes import auth, events, feedback, registrations
from eventhub.routes.deps import get_store, services_for

# Configure logging
log_dir = Path(settings.log_dir).expanduser()
log_dir.mkdir(parents=True, exist_ok=True)
log_file = log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.ALREADY_EXISTS: 409,
    ErrorCode.CONFLICT: 409,
    ErrorCode.INVALID_INPUT: 422,
    ErrorCode.PRECONDITION_FAILED: 412,
    ErrorCode.PERMISSION_DENIED: 403,
    ErrorCode.STORE_UNAVAILABLE: 503,
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Event Planner application")
    create_db_and_tables()
    start_scheduler(services_for(get_store()).events)
    yield
    shutdown_scheduler()
    logger.info("Event Planner application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Discover, create and register for events, and rate them afterwards",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for external access
origins = (
    ["*"]
    if settings.allowed_origins == "*"
    else [o.strip() for o in settings.allowed_origins.split(",")]
)
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(events.router)
app.include_router(registrations.router)
app.include_router(feedback.router)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    """Map domain errors to HTTP status codes with a user-safe body."""
    status_code = STATUS_BY_CODE.get(exc.code, 400)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"code": exc.code.value, "detail": exc.message},
    )


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}


@app.get("/categories")
async def categories():
    """Event categories offered by the event form."""
    return EVENT_CATEGORIES
