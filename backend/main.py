"""
FastAPI Application Entry Point
"""
from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from neoroutine import __version__
from neoroutine.core.config import settings
from neoroutine.routes import badges, checkins, health, insights, reminders
from neoroutine.services.scheduler import start_scheduler, stop_scheduler
from neoroutine.utils.cache import TTLCache

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Silence noisy third-party loggers
logging.getLogger('httpx').setLevel(logging.WARNING)
logging.getLogger('httpcore').setLevel(logging.WARNING)
logging.getLogger('apscheduler.scheduler').setLevel(logging.WARNING)
logging.getLogger('apscheduler.executors').setLevel(logging.WARNING)
logging.getLogger('apscheduler.executors.default').setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan context manager for startup/shutdown events
    """
    # Startup
    if settings.SCHEDULER_ENABLED:
        try:
            start_scheduler()
            logger.info("✓ Adaptive reminder scheduler started")
        except Exception as e:
            logger.warning(f"Could not start scheduler: {e}")

    yield

    # Shutdown
    if settings.SCHEDULER_ENABLED:
        try:
            stop_scheduler()
            logger.info("✓ Adaptive reminder scheduler stopped")
        except Exception as e:
            logger.warning(f"Error stopping scheduler: {e}")


# Initialize FastAPI app with lifespan
app = FastAPI(
    title="NeoRoutine API",
    version=__version__,
    lifespan=lifespan
)

app.state.insights_cache = TTLCache(settings.INSIGHTS_CACHE_TTL_SECONDS)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Wrap HTTP errors in the standard response envelope"""
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail), "data": None},
        headers=getattr(exc, "headers", None)
    )


def _error_summaries(errors):
    return [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors]


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Wrap request validation errors in the standard response envelope"""
    errors = exc.errors()
    message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
    return JSONResponse(
        status_code=422,
        content={"success": False, "message": message, "data": {"errors": _error_summaries(errors)}}
    )


# Register routes
app.include_router(health.router)
app.include_router(checkins.router)
app.include_router(badges.router)
app.include_router(insights.router)
app.include_router(reminders.router)
