"""
Customer Dashboard API - Main Application

Serves the audience segmentation engine to the dashboard frontend:
segment/campaign builders (live audience size and preview) and the
campaign detail view.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging

from app.api.v2.router import api_router
from app.config import settings
from app.data.mock_data import MockDataStore
from app.exceptions import register_exception_handlers
from app.middleware.correlation import CorrelationIdMiddleware, install_log_filter

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s",
)
install_log_filter()
logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Customer Dashboard API...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    if getattr(app.state, "store", None) is None:
        app.state.store = MockDataStore(
            seed=settings.MOCK_DATA_SEED,
            customer_count=settings.MOCK_CUSTOMER_COUNT,
            order_count=settings.MOCK_ORDER_COUNT,
        )
    yield
    # Shutdown
    logger.info("Shutting down Customer Dashboard API...")


def create_app() -> FastAPI:
    """Build the FastAPI application."""
    application = FastAPI(
        title="Customer Dashboard API",
        description="Audience segmentation and campaigns for the customer dashboard",
        version=APP_VERSION,
        docs_url="/docs" if settings.DOCS_ENABLED else None,
        redoc_url="/redoc" if settings.DOCS_ENABLED else None,
        lifespan=lifespan,
    )
    application.state.store = None

    allowed_origins = [settings.FRONTEND_URL]
    # Vite dev servers
    allowed_origins.extend([
        "http://localhost:5173",
        "http://localhost:8080",
    ])

    application.add_middleware(
        CORSMiddleware,
        allow_origins=list(dict.fromkeys(allowed_origins)),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    application.add_middleware(CorrelationIdMiddleware)

    register_exception_handlers(application)

    application.include_router(api_router, prefix="/api/v2")

    @application.get("/")
    async def root():
        """Root endpoint - API info."""
        response = {
            "name": "Customer Dashboard API",
            "version": APP_VERSION,
            "health": "/health",
        }
        if settings.DOCS_ENABLED:
            response["docs"] = "/docs"
        return response

    @application.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": APP_VERSION,
            "environment": settings.ENVIRONMENT,
        }

    return application


app = create_app()


# For running with uvicorn directly (development only)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=5001,
        reload=settings.DEBUG,
    )
