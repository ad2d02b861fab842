"""
API v1 Router
"""

from fastapi import APIRouter

from f1taxmate.api.v1.endpoints import forms, monitoring, tax_compute

api_router = APIRouter()

api_router.include_router(monitoring.router, tags=["monitoring"])
api_router.include_router(tax_compute.router, prefix="/tax-compute", tags=["tax-computation"])
api_router.include_router(forms.router, prefix="/forms", tags=["form-packages"])
