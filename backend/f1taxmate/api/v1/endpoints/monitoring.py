"""
Monitoring and Health Check Endpoints
"""

from fastapi import APIRouter, Depends
from datetime import datetime, timezone
import structlog

from f1taxmate.core.config import settings
from f1taxmate.core.exceptions import F1TaxMateError
from f1taxmate.models.forms import TEMPLATE_PATHS, FormType
from f1taxmate.monitoring.metrics import metrics_collector
from f1taxmate.services.template_store import TemplateStore, get_template_store

router = APIRouter()
logger = structlog.get_logger()

# Every package needs at least one of these, so a store that serves it is usable
PROBE_TEMPLATE = TEMPLATE_PATHS[FormType.FORM_8843]


@router.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
        "tax_year": settings.TAX_YEAR,
    }


@router.get("/health/detailed")
async def detailed_health_check(template_store: TemplateStore = Depends(get_template_store)):
    """Health check including template store reachability"""
    health_status = {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": settings.VERSION,
        "tax_year": settings.TAX_YEAR,
        "dependencies": {}
    }

    try:
        await template_store.load(PROBE_TEMPLATE)
        health_status["dependencies"]["template_store"] = {
            "status": "ok",
            "source": settings.TEMPLATE_SOURCE,
        }
    except F1TaxMateError as e:
        logger.warning("Template store health check failed", error=str(e))
        health_status["dependencies"]["template_store"] = {
            "status": "error",
            "source": settings.TEMPLATE_SOURCE,
            "error": e.message,
        }
        health_status["status"] = "degraded"

    return health_status


@router.get("/metrics")
async def get_metrics():
    """Counters, timings and per-product package stats"""
    return metrics_collector.get_metrics_summary()
