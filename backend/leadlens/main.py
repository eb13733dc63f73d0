"""
LeadLens

FastAPI application entry point: logging, lifespan and router wiring.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api import (
    projects_router,
    context_router,
    personas_router,
    conversations_router,
    tools_router,
)
from .config import settings
from .database import init_db, close_db
from .tracer import setup_follow_through_logging

VERSION = "1.0.0"

QUIET_LOGGERS = ("aiosqlite", "sqlalchemy.engine", "httpx", "openai", "google")


def configure_logging() -> None:
    """DEBUG in debug mode; WARNING under follow-through so the tracer output stands alone."""
    if settings.debug:
        level = logging.DEBUG
    elif settings.follow_through:
        level = logging.WARNING
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if not settings.debug:
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    setup_follow_through_logging()


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Fail fast on a missing provider key, then make sure the schema exists."""
    logger.info("Starting LeadLens...")
    try:
        settings.validate_provider_key()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        raise

    _, backup_key = settings.get_credentials()
    logger.info(
        f"Provider {settings.llm_provider}, generation model {settings.get_model('generation')}, "
        f"backup credential {'configured' if backup_key else 'not configured'}"
    )
    if settings.grounding_max_chars > 0:
        logger.info(f"Grounding documents above {settings.grounding_max_chars} characters are refused")

    await init_db()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down LeadLens...")
    await close_db()


app = FastAPI(
    title="LeadLens",
    description="Sales and marketing text generation grounded in project context.",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (projects_router, context_router, personas_router, conversations_router, tools_router):
    app.include_router(router)


@app.get("/")
async def root():
    """Service info."""
    return {
        "name": "LeadLens",
        "version": VERSION,
        "provider": settings.llm_provider,
        "persist_generated_artifacts": settings.persist_generated_artifacts,
        "docs": "/docs",
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}
