"""
API Response Models
"""

from pydantic import BaseModel, Field
from typing import Dict, List

from .forms import ProductId, ProductOption
from .tax_result import TaxResult


class TaxComputeResponse(BaseModel):
    """Computed result with the products it unlocks"""
    tax_result: TaxResult
    products: List[ProductOption] = Field(default_factory=list)
    refund_by_product: Dict[ProductId, int] = Field(default_factory=dict)
    has_net_underpayment: bool = False
    warnings: List[str] = Field(default_factory=list)


class ProductsResponse(BaseModel):
    """Products offered for a filing"""
    products: List[ProductOption] = Field(default_factory=list)
    has_net_underpayment: bool = False
