"""Kanban Boards API - Main Application"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from kanban_boards import __version__
from kanban_boards.config import settings
from kanban_boards.routes import activity, boards, cards, comments, labels, lists, members

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info(f"Starting {settings.app_name} ({settings.environment})...")
    if not settings.database_path:
        logger.warning("DATABASE_PATH not set, using in-memory storage")
    yield
    logger.info(f"Shutting down {settings.app_name}...")


app = FastAPI(
    title=settings.app_name,
    description="Boards, lists, cards, members and labels",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)


# Exception handlers
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


# Include routers
app.include_router(boards.router, prefix="/boards", tags=["Boards"])
app.include_router(members.router, prefix="/boards", tags=["Board Members"])
app.include_router(lists.router, tags=["Lists"])
app.include_router(cards.router, tags=["Cards"])
app.include_router(labels.router, tags=["Labels"])
app.include_router(comments.router, tags=["Comments"])
app.include_router(activity.router, tags=["Activity"])


# Health check endpoints
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": __version__,
    }


def run():
    """Serve the API with uvicorn"""
    import argparse

    import uvicorn

    parser = argparse.ArgumentParser(description=settings.app_name)
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8000)
    args = parser.parse_args()

    logger.info(f"Starting server on {args.host}:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    run()
