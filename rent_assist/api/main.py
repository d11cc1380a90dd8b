"""FastAPI application factory"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from rent_assist.api.middleware import RequestIDMiddleware, MetricsMiddleware
from rent_assist.api.v1 import applications, eligibility, fees, schedule
from rent_assist.infrastructure.observability.logging import setup_logging
from rent_assist.config import settings
from rent_assist.infrastructure.database import session as database

# Setup structured logging
setup_logging(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    database.create_tables(database.engine)
    yield


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        lifespan=lifespan,
        title="Rent Assist",
        description="Rent-assistance fee, schedule and eligibility service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(fees.router, prefix="/v1", tags=["fees"])
    app.include_router(schedule.router, prefix="/v1", tags=["schedules"])
    app.include_router(eligibility.router, prefix="/v1", tags=["eligibility"])
    app.include_router(applications.router, prefix="/v1", tags=["applications"])

    return app


app = create_app()
