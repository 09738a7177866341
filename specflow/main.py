# specflow/main.py
"""
Specflow Orchestrator - spec-driven project documentation service.
"""
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI
from starlette.middleware.cors import CORSMiddleware

from dotenv import load_dotenv
load_dotenv()

from specflow.core.config import settings
from specflow.core.env import validate_environment_or_exit
from specflow.core.logging import log
from specflow.llm import LLMFactory, client_for


# ---------------------------------------------------------------------------
# LIFESPAN
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    log("API", "Specflow starting...")

    validate_environment_or_exit()
    settings.ensure_directories()

    from specflow.db import connect_db, disconnect_db
    await connect_db()

    yield

    log("API", "Shutting down...")
    await disconnect_db()


# ---------------------------------------------------------------------------
# APP INITIALIZATION
# ---------------------------------------------------------------------------

def create_app(
    *,
    rate_limit: Optional[str] = None,
    artifacts_dir: Optional[Path] = None,
    llm_factory: Optional[LLMFactory] = None,
    monitoring: bool = True,
) -> FastAPI:
    """
    Build the application.

    Every collaborator the routes use is placed on app.state; the keyword
    arguments override the settings-derived defaults.
    """
    from specflow.api.errors import register_error_handlers
    from specflow.lib.artifact_store import ArtifactStore
    from specflow.lib.rate_limit import register_rate_limiting
    from specflow.orchestration.phase_spec import get_phase_spec

    app = FastAPI(
        title="Specflow Orchestrator",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.artifact_store = ArtifactStore(artifacts_dir or settings.paths.artifacts_dir)
    app.state.llm_factory = llm_factory or client_for
    app.state.phase_spec = get_phase_spec()

    register_error_handlers(app)

    # Monitoring
    if monitoring:
        from specflow.lib.monitoring import register_monitoring
        register_monitoring(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting - applies to every route
    register_rate_limiting(app, rate_limit)

    # ---------------------------------------------------------------------------
    # API ROUTES
    # ---------------------------------------------------------------------------

    from specflow.api import (
        health,
        projects,
        phases,
        approvals,
        catalog,
        artifacts,
        auth,
        admin,
    )

    app.include_router(health.router)
    app.include_router(projects.router)
    app.include_router(phases.router)
    app.include_router(approvals.router)
    app.include_router(catalog.router)
    app.include_router(artifacts.router)
    app.include_router(auth.router)
    app.include_router(admin.router)

    return app


# ---------------------------------------------------------------------------
# RUN
# ---------------------------------------------------------------------------

def run():
    """Console entry point: validate the environment, then serve."""
    validate_environment_or_exit()
    uvicorn.run(
        "specflow.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
