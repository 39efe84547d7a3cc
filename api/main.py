"""DeckViz FastAPI Application"""

import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv
load_dotenv()  # Load .env file

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from .routes import decks, designs, health

# Configure logging
logging.basicConfig(
    level=os.getenv("DECK_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class ProxyHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to handle X-Forwarded-Proto for HTTPS redirects behind a reverse proxy."""

    async def dispatch(self, request: Request, call_next):
        if request.headers.get("x-forwarded-proto") == "https":
            request.scope["scheme"] = "https"
        return await call_next(request)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler."""
    logger.info("Starting DeckViz API...")
    yield
    for design in designs.DESIGNS.values():
        design["controller"].cancel()
    logger.info("Shutting down DeckViz API...")


app = FastAPI(
    title="DeckViz",
    description="Procedural deck configurator API",
    version="0.1.0",
    lifespan=lifespan,
)

# Proxy headers middleware (must be added first)
app.add_middleware(ProxyHeadersMiddleware)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.getenv(
        "DECK_CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
    ).split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Deck-Build-Error"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(decks.router, prefix="/api/decks", tags=["Decks"])
app.include_router(designs.router, prefix="/api/designs", tags=["Designs"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "DeckViz",
        "version": "0.1.0",
        "status": "running",
        "docs": "/docs",
    }
