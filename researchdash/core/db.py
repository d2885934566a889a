import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
from fastapi import FastAPI

from researchdash.core.config import Settings

logger = logging.getLogger(__name__)

USER_AGENT = "researchdash/1.0"


def create_http_client(settings: Settings) -> httpx.AsyncClient:
    """Builds the outbound HTTP client shared by every repository."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(settings.http_timeout_seconds),
        follow_redirects=True,
        headers={"User-Agent": USER_AGENT},
        limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
    )


# --- Lifespan Management ---
@asynccontextmanager
async def lifespan(app: FastAPI, settings: Settings) -> AsyncGenerator[None, None]:
    """
    Handles application startup and shutdown events.

    Stores the settings object and a shared `httpx.AsyncClient` on app.state.
    Receives settings explicitly so tests can hand in their own instance.
    """
    logger.info("Application lifespan startup: Initializing resources...")

    app.state.settings = settings
    app.state.http_client = create_http_client(settings)
    logger.info(
        f"Shared HTTP client created (timeout={settings.http_timeout_seconds}s)."
    )

    # Configuration problems are reported per request; here we only log them
    if not settings.notion_token:
        logger.warning(
            "NOTION_TOKEN not configured. Every Notion-backed resource will answer 'not configured'."
        )
    for label, database_id in (
        ("areas", settings.notion_areas_database_id),
        ("keywords", settings.notion_keywords_database_id),
        ("assumptions", settings.notion_assumptions_database_id),
        ("sources", settings.notion_sources_database_id),
        ("saved", settings.notion_saved_database_id),
        ("content", settings.notion_content_database_id),
    ):
        if not database_id:
            logger.warning(f"[Lifespan Startup] Notion {label} database id is not set.")
    if not settings.n8n_webhook_url:
        logger.warning("[Lifespan Startup] n8n webhook URL is not set.")

    logger.info("Resource initialization process completed.")
    yield  # Application runs here

    # --- Shutdown ---
    logger.info("Application lifespan shutdown: Cleaning up resources...")
    http_client = getattr(app.state, "http_client", None)
    if http_client is not None:
        try:
            await http_client.aclose()
            logger.info("Shared HTTP client closed.")
        except Exception as e:
            logger.warning(f"Error closing shared HTTP client: {e}")
    logger.info("Resource cleanup finished.")
