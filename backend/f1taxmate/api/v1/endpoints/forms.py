"""
Form Package Endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Response, status
import structlog

from f1taxmate.api.v1.errors import http_error
from f1taxmate.core.exceptions import F1TaxMateError
from f1taxmate.models.filing import FormData
from f1taxmate.models.forms import ProductId
from f1taxmate.monitoring.metrics import metrics_collector
from f1taxmate.services.filing_validators import ensure_valid
from f1taxmate.services.package_assembler import PackageAssembler
from f1taxmate.services.products import applicable_products
from f1taxmate.services.tax_rules_engine import get_tax_rules_engine

router = APIRouter()
logger = structlog.get_logger()


def get_package_assembler() -> PackageAssembler:
    return PackageAssembler()


@router.post("/{product_id}")
async def generate_package(
    product_id: ProductId,
    form_data: FormData,
    assembler: PackageAssembler = Depends(get_package_assembler)
):
    """Compute the filing and return the assembled package PDF for one product"""
    metrics_collector.increment_counter("api_requests")

    try:
        ensure_valid(form_data, product_id)

        offered = {option.id for option in applicable_products(form_data)}
        if product_id not in offered:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Product {product_id.value} is not available for this filing"
            )

        tax_result = get_tax_rules_engine().compute_tax(form_data)
        metrics_collector.increment_counter("tax_computations")

        package = await assembler.assemble(product_id, form_data, tax_result)

        return Response(
            content=package.content,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f'attachment; filename="{package.filename}"',
                "X-Page-Count": str(package.page_count),
            }
        )

    except HTTPException:
        raise
    except F1TaxMateError as e:
        raise http_error(e) from e
    except Exception as e:
        logger.error("Package generation failed", product=product_id.value, error=str(e))
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Package generation failed: {str(e)}"
        )
