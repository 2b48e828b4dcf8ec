"""
Support Chat Relay - Main FastAPI Application
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import settings
from .api import chat_router, knowledge_router, documents_router, register_exception_handlers
from .core.logging_config import setup_logging
from .knowledge import KnowledgeBase
from .llm import create_llm_provider_from_settings
from .middleware import RequestLoggingMiddleware
from .sessions import SessionStore
from .storage import LocalStorage

logger = logging.getLogger(__name__)


async def sweep_sessions_periodically(store: SessionStore, interval: float) -> None:
    """Reclaim expired sessions every ``interval`` seconds until cancelled."""
    while True:
        await asyncio.sleep(interval)
        store.sweep_expired()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    # Startup
    setup_logging(settings)

    app.state.session_store = SessionStore(ttl=timedelta(minutes=settings.session_ttl_minutes))
    app.state.knowledge_base = KnowledgeBase(
        LocalStorage(settings.local_storage_path), settings.knowledge_base_file
    )
    app.state.llm_provider = create_llm_provider_from_settings(settings)
    if app.state.llm_provider is None:
        logger.warning(f"No API key configured for provider '{settings.ai_provider}'; chat replies are disabled")

    sweeper = asyncio.create_task(
        sweep_sessions_periodically(app.state.session_store, settings.session_sweep_interval_seconds)
    )

    logger.info(f"Starting {settings.app_name} v{settings.app_version}")
    logger.info(f"AI provider: {settings.ai_provider}, model: {getattr(app.state.llm_provider, 'model', '-')}")
    logger.info(f"Knowledge base: {settings.local_storage_path}/{settings.knowledge_base_file}")
    yield
    # Shutdown
    sweeper.cancel()
    try:
        await sweeper
    except asyncio.CancelledError:
        pass
    logger.info(f"Shutting down {settings.app_name}")


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Streaming chat relay for the customer-support widget",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

if settings.log_api_requests:
    app.add_middleware(RequestLoggingMiddleware)

register_exception_handlers(app)

app.include_router(chat_router)
app.include_router(knowledge_router)
app.include_router(documents_router)


@app.get("/")
async def root():
    return {
        "app": settings.app_name,
        "version": settings.app_version,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "provider": settings.ai_provider,
        "version": settings.app_version,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "supportchat.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
