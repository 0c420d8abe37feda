from __future__ import annotations

from fastapi import FastAPI

from pipelines.config import get_validation_config
from pipelines.validation import BagValidationService, build_service

from .validate import router as validate_router


def create_app(service: BagValidationService | None = None) -> FastAPI:
    """Build the API; without an explicit service one is configured from the environment."""
    app = FastAPI(title="Validate DANS bag")
    app.state.validation_service = service or build_service(get_validation_config())
    app.include_router(validate_router)

    @app.get("/")
    def index():
        return {"name": "Validate DANS bag"}

    return app
