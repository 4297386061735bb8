"""Main entry point for the Directory Listing Service FastAPI application.

The service parses shell transcripts of ``cd``/``ls`` sessions into directory
trees and answers size queries over them.

To run the development server:
    uv run uvicorn main:app --reload

To run in production:
    uv run uvicorn main:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from pydantic import ValidationError

from api.dependencies import initialize_tree_store, shutdown_tree_store
from api.exceptions import (
    generic_exception_handler,
    malformed_size_handler,
    runtime_error_handler,
    threshold_unsatisfiable_handler,
    tree_not_found_handler,
    validation_exception_handler,
    value_error_handler,
)
from api.routes import trees as trees_routes
from models.directory_tree import ThresholdUnsatisfiableError
from models.store import TreeNotFoundError
from models.transcript import MalformedSizeError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared TreeStore on startup and drop it on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control back to FastAPI to handle requests.
    """
    logger.info("Starting Directory Listing Service")
    initialize_tree_store()

    yield

    logger.info("Shutting down Directory Listing Service")
    shutdown_tree_store()


app = FastAPI(
    title="Directory Listing Service",
    description="Parse cd/ls transcripts into directory trees and query their sizes",
    version="0.1.0",
    lifespan=lifespan,
)

# Specific exceptions before general ones
app.add_exception_handler(TreeNotFoundError, tree_not_found_handler)
app.add_exception_handler(MalformedSizeError, malformed_size_handler)
app.add_exception_handler(ThresholdUnsatisfiableError, threshold_unsatisfiable_handler)
app.add_exception_handler(ValidationError, validation_exception_handler)
app.add_exception_handler(ValueError, value_error_handler)
app.add_exception_handler(RuntimeError, runtime_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

app.include_router(trees_routes.router)


@app.get("/")
async def root():
    """Root endpoint - returns a welcome message."""
    return {
        "message": "Welcome to the Directory Listing Service API",
        "version": "0.1.0",
        "docs_url": "/docs",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}
