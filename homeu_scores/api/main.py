"""FastAPI application factory"""

from fastapi import Depends, FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from homeu_scores.api.dependencies import get_engine
from homeu_scores.api.errors import register_exception_handlers
from homeu_scores.api.middleware import MetricsMiddleware, RequestIDMiddleware
from homeu_scores.api.v1 import manager, resident
from homeu_scores.config import settings
from homeu_scores.infrastructure.dispatch import ENGINE_VERSION, ScoringEngine
from homeu_scores.infrastructure.observability.logging import setup_logging

setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="HomeU Scores",
        description="Rental scoring engine for residents and property managers",
        version=ENGINE_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Last added = first executed
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    @app.get("/health")
    def health_check(engine: ScoringEngine = Depends(get_engine)):
        return {"status": "ok", "service": settings.service_name, "engine": engine.health()}

    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(resident.router, prefix="/v1/scores", tags=["resident"])
    app.include_router(manager.router, prefix="/v1/scores", tags=["property-manager"])

    return app


app = create_app()
