"""
FastAPI application entry point
"""
import logging
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables FIRST, before any other imports
# Explicitly look for .env in the backend directory (parent of chat_relay/)
backend_dir = Path(__file__).parent.parent
env_path = backend_dir / ".env"
load_dotenv(dotenv_path=env_path)

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from chat_relay.config import get_settings, resolve_log_level
from chat_relay.routes import chat
from chat_relay.services.errors import ConfigurationError
from chat_relay.services.validator import require_api_key

settings = get_settings()

logging.basicConfig(level=resolve_log_level(settings.log_level))
log = logging.getLogger("chat_relay")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup check - a missing API key is reported, requests then fail with 500."""
    try:
        require_api_key(get_settings())
    except ConfigurationError as e:
        log.warning("%s; chat requests will fail until it is configured", e)
    else:
        log.info("Relay ready: model=%s", get_settings().model)
    yield


app = FastAPI(
    title="Meals Planner Chat Relay",
    description="Streams Meals Planner completions to the chat frontend",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware - allow frontend to communicate
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(chat.router, prefix="/api", tags=["chat"])


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {
        "service": "Meals Planner Chat Relay",
        "version": "1.0.0",
        "endpoints": {
            "health": "/health",
            "chat": "/api/chat (POST, text/event-stream)",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "ok", "service": "chat-relay"}


def run():
    import uvicorn

    uvicorn.run("chat_relay.main:app", host="0.0.0.0", port=8000)
