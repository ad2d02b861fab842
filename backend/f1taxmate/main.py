"""
F1TaxMate API
=============
Computes 1040-NR and IL-1040 results for F-1 students and assembles the
fillable filing packages. Filing data lives only for the duration of a
request; nothing is stored.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from f1taxmate.api.v1.api import api_router
from f1taxmate.core.config import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("F1TaxMate starting up",
               environment=settings.ENVIRONMENT,
               tax_year=settings.TAX_YEAR,
               template_source=settings.TEMPLATE_SOURCE)
    yield
    logger.info("F1TaxMate shutting down")


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="Nonresident tax computation and filing package API",
        version=settings.VERSION,
        debug=settings.DEBUG,
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_V1_STR)
    return app


app = create_app()
