"""
CareCall - Patient Monitoring API
Dashboard backend for clinicians and family members following elderly
patients through automated phone check-ins.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .models import base
from .api import alerts, auth, calls, patients, users
from .core.audit_middleware import AuditMiddleware
from .core.config import settings
from .seed_demo import seed_demo_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # NOTE: In production, use Alembic migrations instead of create_all()
    base.Base.metadata.create_all(bind=base.engine)
    if settings.SEED_DEMO_DATA:
        seed_demo_data()
    logger.info("%s %s started", settings.APP_NAME, settings.VERSION)
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="CareCall Monitoring API",
        description=(
            "Call transcripts, health assessments and alerts for elderly patients "
            "monitored through automated phone check-ins."
        ),
        version=settings.VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(AuditMiddleware)

    app.include_router(auth.router, prefix="/api")
    app.include_router(users.router, prefix="/api")
    app.include_router(patients.router, prefix="/api")
    app.include_router(alerts.router, prefix="/api")
    app.include_router(calls.router, prefix="/api")

    @app.get("/health")
    def health_check():
        return {"status": "healthy", "service": "CareCall API", "version": settings.VERSION}

    return app


app = create_app()
