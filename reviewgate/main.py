import logging

from fastapi import FastAPI

from reviewgate import __version__
from reviewgate.core.config import config
from reviewgate.core.utils.logging import configure_logging
from reviewgate.webhooks.router import get_github_client
from reviewgate.webhooks.router import router as webhook_router

# --- Application Setup ---

configure_logging(config.logging.level, config.logging.format)

app = FastAPI(
    title="reviewgate",
    description="Path-scoped reviewer requirements for pull requests.",
    version=__version__,
)

app.include_router(webhook_router, prefix="/webhooks", tags=["GitHub Webhooks"])


@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the service is running."""
    return {"status": "ok", "message": "reviewgate is running."}


@app.on_event("startup")
async def startup_event():
    """Refuse to start without the GitHub App settings."""
    config.validate()
    logging.info("reviewgate webhook service started")


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown logic."""
    await get_github_client().close()
    logging.info("reviewgate webhook service stopped")
