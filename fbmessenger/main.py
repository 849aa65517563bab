"""FastAPI application initialization."""

import os
from contextlib import asynccontextmanager

import logfire
import sentry_sdk
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration

from fbmessenger.api import health, webhook
from fbmessenger.config import get_settings
from fbmessenger.logging_config import redact_tokens, setup_logfire
from fbmessenger.services.messenger import Messenger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: observability, adapter setup, handler draining."""
    settings = get_settings()

    setup_logfire(app)

    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            traces_sample_rate=settings.sentry_traces_sample_rate,
            integrations=[FastApiIntegration()],
        )

    if getattr(app.state, "messenger", None) is None:
        app.state.messenger = Messenger.from_settings(settings)
    messenger: Messenger = app.state.messenger

    logfire.info(
        "Application startup complete",
        environment=settings.env,
        page_id=messenger.page_id,
        config=redact_tokens(
            settings.model_dump(
                include={
                    "facebook_page_access_token",
                    "facebook_api_base_url",
                    "facebook_graph_api_version",
                    "max_concurrent_handlers",
                }
            )
        ),
    )

    yield

    # ==========================================================================
    # Graceful Shutdown
    # ==========================================================================
    logfire.info(
        "Application shutdown initiated",
        pending_tasks=messenger.dispatcher.pending,
    )
    completed, cancelled = await messenger.dispatcher.drain(
        timeout=settings.handler_drain_timeout_seconds
    )
    await messenger.aclose()
    logfire.info(
        "Application shutdown complete",
        completed_count=completed,
        cancelled_count=cancelled,
    )


def create_app(messenger: Messenger | None = None) -> FastAPI:
    """
    Build the webhook application.

    Args:
        messenger: Adapter with handlers registered. When omitted, one is
            built from settings at startup (with no handlers).
    """
    application = FastAPI(
        title="Facebook Messenger Webhook",
        description="Messenger Send API client and webhook receiver",
        version="0.1.0",
        lifespan=lifespan,
    )
    application.state.messenger = messenger

    application.include_router(health.router, tags=["health"])
    application.include_router(webhook.router, prefix="/webhook", tags=["webhook"])
    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        "fbmessenger.main:app",
        host="0.0.0.0",
        port=port,
        reload=os.getenv("ENV") == "local",
    )
