"""
Tax Computation Endpoints
"""

from fastapi import APIRouter, HTTPException, status
import structlog

from f1taxmate.api.v1.errors import http_error
from f1taxmate.core.exceptions import F1TaxMateError
from f1taxmate.models.filing import FormData
from f1taxmate.models.responses import ProductsResponse, TaxComputeResponse
from f1taxmate.monitoring.metrics import metrics_collector
from f1taxmate.services.filing_validators import ensure_valid
from f1taxmate.services.products import applicable_products, has_net_underpayment, refund_by_product
from f1taxmate.services.tax_rules_engine import get_tax_rules_engine

router = APIRouter()
logger = structlog.get_logger()


@router.post("", response_model=TaxComputeResponse)
async def compute_tax(form_data: FormData):
    """Validate the filing and compute federal and state results"""
    metrics_collector.increment_counter("api_requests")

    try:
        report = ensure_valid(form_data)
        tax_result = get_tax_rules_engine().compute_tax(form_data)
        metrics_collector.increment_counter("tax_computations")

        return TaxComputeResponse(
            tax_result=tax_result,
            products=applicable_products(form_data),
            refund_by_product=refund_by_product(form_data, tax_result),
            has_net_underpayment=has_net_underpayment(tax_result),
            warnings=report.warnings,
        )

    except F1TaxMateError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Tax computation request failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Tax computation failed: {str(e)}"
        )


@router.post("/products", response_model=ProductsResponse)
async def list_products(form_data: FormData):
    """Products offered for the filing and whether payable ones are refused"""
    metrics_collector.increment_counter("api_requests")

    try:
        ensure_valid(form_data)
        tax_result = get_tax_rules_engine().compute_tax(form_data)

        return ProductsResponse(
            products=applicable_products(form_data),
            has_net_underpayment=has_net_underpayment(tax_result),
        )

    except F1TaxMateError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Product listing failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Product listing failed: {str(e)}"
        )
