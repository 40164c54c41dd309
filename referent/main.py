import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from referent.api.routes import router
from referent.core.config import settings

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Configure logging on startup.
    """
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("Starting Referent article service...")

    yield

    logger.info("Shutting down Referent article service...")

app = FastAPI(
    title="Referent",
    description="API for retrieving web articles and extracting their title, date and body text",
    version="1.0.0",
    lifespan=lifespan
)

# Include API routes
app.include_router(router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "Referent",
        "version": "1.0.0",
        "endpoints": {
            "parse": "POST /parse",
            "translate": "POST /translate",
            "health": "GET /health"
        }
    }
