"""FastAPI application entrypoint for the Sky API."""

from fastapi import FastAPI

from skyapi.core.config import configure_logging
from skyapi.core.errors import register_error_handlers

configure_logging()

app = FastAPI(title="Sky API")
register_error_handlers(app)


@app.get("/health")
def health() -> dict[str, str]:
    """Health check stub endpoint for service readiness."""
    return {"status": "ok"}
