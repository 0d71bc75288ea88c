import logging
from fastapi import FastAPI, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from accounts.common.config import settings
from accounts.common.database import database
from accounts.common.error_handlers import register_exception_handlers
from accounts.common.request_logging import RequestLogMiddleware
from accounts.common.responses import error_response
from accounts.api.v1 import auth, users


# Configure logging
logging.basicConfig(
    level=logging.INFO if not settings.debug else logging.DEBUG,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events.

    Startup blocks until the database answers, so no request is served
    before the first successful connection.
    """
    await database.connect()
    logger.info(f"{settings.app_name} {settings.app_version} ready")

    yield

    await database.close()


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
    lifespan=lifespan,
)

register_exception_handlers(app)

app.add_middleware(RequestLogMiddleware)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "status": "running"
    }


@app.get("/health")
async def health():
    """Health check endpoint, failing until the database is connected."""
    if not database.is_ready:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content=error_response("database is not ready"),
        )
    return {"status": "healthy"}


app.include_router(auth.router, prefix="/api/v1", tags=["auth"])
app.include_router(users.router, prefix="/api/v1", tags=["users"])


def run() -> None:
    """Serve the application with uvicorn."""
    import uvicorn

    uvicorn.run("accounts.main:app", host=settings.host, port=settings.app_port)
