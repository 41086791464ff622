import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from .config import get_settings
from .middleware import register_error_handlers
from .monitoring.metrics import metrics_endpoint
from .orchestration import ModelRouter
from .routes import ai_router

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting OmegaAIR")
    app.state.model_router = ModelRouter.from_settings(settings)
    logger.info(f"OmegaAIR status: {app.state.model_router.system_status()['status']}")

    yield
    # Shutdown
    logger.info("Shutting down OmegaAIR")
    await app.state.model_router.close()


app = FastAPI(
    title=settings.api_title,
    version=settings.api_version,
    debug=settings.debug,
    lifespan=lifespan
)

register_error_handlers(app)

# Include routers
app.include_router(ai_router)
app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)


@app.get("/")
async def root():
    return {
        "message": "OmegaAIR provider router",
        "version": settings.api_version,
        "docs": "/docs"
    }
