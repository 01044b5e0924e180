"""Landing Zone Portal Backend: FastAPI application entry point."""

import logging
import os
import random
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from backend.ai.extractor import build_extractor
from backend.conversation.orchestrator import AssistantOrchestrator
from backend.conversation.session_store import InMemoryConversationStore
from backend.middleware.rate_limit import RateLimitMiddleware
from backend.routes import conversation, customers, deployments, templates
from backend.services.customer_store import CustomerStore
from backend.services.deployment_runner import DeploymentRunner
from backend.services.progress_tracker import DeploymentProgressTracker
from lz_engine import __version__
from lz_engine.catalog import TemplateCatalog
from lz_engine.requirements import RequirementExtractor

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def _runner_from_env(rng: random.Random) -> DeploymentRunner:
    delay = (
        float(os.getenv("DEPLOYMENT_STEP_DELAY_MIN", "2.0")),
        float(os.getenv("DEPLOYMENT_STEP_DELAY_MAX", "8.0")),
    )
    return DeploymentRunner(
        step_delay=delay,
        failure_rate=float(os.getenv("DEPLOYMENT_FAILURE_RATE", "0.05")),
        rng=rng,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application startup and shutdown."""
    logger.info("Landing Zone portal started with %d templates", app.state.catalog.count)
    yield
    await app.state.deployment_runner.shutdown()


def create_app(
    requests_per_minute: Optional[int] = None,
    ai_requests_per_minute: Optional[int] = None,
    extractor: Optional[RequirementExtractor] = None,
    deployment_runner: Optional[DeploymentRunner] = None,
    rng: Optional[random.Random] = None,
) -> FastAPI:
    """Build an application with its own in-memory state."""
    rng = rng or random.Random()

    app = FastAPI(
        title="AI Landing Zone Portal API",
        description="Conversational assistant for designing and deploying AI landing zones",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.catalog = TemplateCatalog()
    app.state.customers = CustomerStore()
    app.state.conversations = InMemoryConversationStore()
    app.state.progress = DeploymentProgressTracker(rng=rng)
    app.state.orchestrator = AssistantOrchestrator(
        conversations=app.state.conversations,
        customers=app.state.customers,
        catalog=app.state.catalog,
        progress=app.state.progress,
        extractor=extractor or build_extractor(),
        rng=rng,
    )
    app.state.deployment_runner = deployment_runner or _runner_from_env(rng)

    # CORS: localhost plus FRONTEND_URL
    frontend_url = os.getenv("FRONTEND_URL")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[frontend_url] if frontend_url else [],
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=requests_per_minute,
        ai_requests_per_minute=ai_requests_per_minute,
    )

    app.include_router(conversation.router, prefix="/api", tags=["AI Assistant"])
    app.include_router(customers.router, prefix="/api", tags=["Customers"])
    app.include_router(templates.router, prefix="/api", tags=["Templates"])
    app.include_router(deployments.router, prefix="/api", tags=["Deployment"])

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "service": "landing-zone-portal"}

    @app.get("/")
    async def root():
        return {"service": "AI Landing Zone Portal API", "version": __version__, "docs": "/docs"}

    return app


app = create_app()
