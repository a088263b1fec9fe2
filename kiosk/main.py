"""Pickup Kiosk Web Application."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, RedirectResponse

from kiosk.core.config import settings
from kiosk.core.database import create_db_and_tables
from kiosk.core.errors import KioskError
from kiosk.routes import attendance, checkin, checkout, events, families, people

# Configure logging
settings.log_dir.mkdir(parents=True, exist_ok=True)
log_file = settings.log_dir / "latest.log"

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    filename=str(log_file),
)
logger = logging.getLogger(__name__)

RETRY_MESSAGE = "Could not complete the request, please retry"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown lifecycle."""
    logger.info("Starting Pickup Kiosk application")
    create_db_and_tables()
    yield
    logger.info("Pickup Kiosk application shut down")


app = FastAPI(
    title=settings.app_name,
    description="Event check-in kiosk with one-time pickup codes for checkout",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS so kiosk browsers on other hosts can call the API
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


@app.exception_handler(KioskError)
async def kiosk_error_handler(request: Request, exc: KioskError):
    """Map service errors onto their HTTP status.

    Server-side failures are logged in full but reach the kiosk screen only
    as a plain retry prompt.
    """
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"detail": RETRY_MESSAGE})
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report malformed requests as 400 with the first problem found."""
    error = exc.errors()[0]
    field = error["loc"][-1] if error.get("loc") else "request"
    if error.get("type") == "missing":
        message = f"Missing required field: {field}"
    else:
        message = f"Invalid value for {field}: {error.get('msg')}"
    return JSONResponse(status_code=400, content={"detail": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    """Never leak internal error text to the kiosk screens."""
    logger.exception(f"{request.method} {request.url.path} error: {exc}")
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# Include routers
app.include_router(checkin.router)
app.include_router(checkout.router)
app.include_router(families.router)
app.include_router(people.router)
app.include_router(events.router)
app.include_router(attendance.router)


@app.get("/")
async def root(request: Request):
    """Redirect root to the interactive API docs."""
    rp = request.scope.get("root_path", "")
    return RedirectResponse(f"{rp}/docs")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "app": settings.app_name}
