"""
Filing Products

Which deliverable bundles apply to a filer, the refund each one recovers, and
the net-underpayment refusal for bundles that would be payable to a
government.
"""

from typing import Dict, List
import structlog

from f1taxmate.core.exceptions import NetUnderpaymentError
from f1taxmate.models.filing import FormData, IncomeState
from f1taxmate.models.forms import ProductId, ProductOption
from f1taxmate.models.tax_result import TaxResult
from f1taxmate.monitoring.metrics import metrics_collector
from f1taxmate.services import income_totals

logger = structlog.get_logger()

PRODUCT_OPTIONS: Dict[ProductId, ProductOption] = {
    ProductId.FORM_8843: ProductOption(
        id=ProductId.FORM_8843,
        label="Form 8843 only",
        description="Statement for Exempt Individuals",
    ),
    ProductId.FEDERAL: ProductOption(
        id=ProductId.FEDERAL,
        label="Federal only",
        description="Form 1040-NR - U.S. Nonresident Alien Income Tax Return (includes Form 8843)",
    ),
    ProductId.ILLINOIS: ProductOption(
        id=ProductId.ILLINOIS,
        label="Illinois only",
        description="Form IL-1040 - Illinois Individual Income Tax Return",
    ),
    ProductId.FICA: ProductOption(
        id=ProductId.FICA,
        label="FICA only",
        description="Form 843 + Form 8316 - FICA Tax Refund Request",
    ),
}

# Bundles whose balance can be owed to the IRS or the state
PAYABLE_PRODUCTS = frozenset({ProductId.FEDERAL, ProductId.ILLINOIS})

UNDERPAYMENT_MESSAGE = (
    "Your federal and state returns together show a balance due. F1TaxMate does not prepare "
    "returns with an amount owed; please consult a tax professional or file directly with the IRS "
    "and the Illinois Department of Revenue."
)


def applicable_products(form_data: FormData) -> List[ProductOption]:
    """
    Products offered for this filing

    No U.S. income: Form 8843 is the only document to file. Otherwise the
    federal bundle (which carries Form 8843), Illinois when income was earned
    there, and the FICA claim when any W-2 had FICA withheld.
    """
    income = form_data.income_info
    if not income.had_us_income:
        return [PRODUCT_OPTIONS[ProductId.FORM_8843]]

    options = [PRODUCT_OPTIONS[ProductId.FEDERAL]]
    if income.income_state == IncomeState.ILLINOIS:
        options.append(PRODUCT_OPTIONS[ProductId.ILLINOIS])
    if income_totals.has_fica_withheld(income):
        options.append(PRODUCT_OPTIONS[ProductId.FICA])
    return options


def refund_by_product(form_data: FormData, tax_result: TaxResult) -> Dict[ProductId, int]:
    """Money back to the filer per product; amounts owed are not listed"""
    refunds: Dict[ProductId, int] = {}
    if tax_result.federal_tax.refund > 0:
        refunds[ProductId.FEDERAL] = tax_result.federal_tax.refund
    if tax_result.state_tax.refund > 0:
        refunds[ProductId.ILLINOIS] = tax_result.state_tax.refund

    fica_total = income_totals.fica_totals(form_data.income_info).total
    if fica_total > 0:
        refunds[ProductId.FICA] = fica_total
    return refunds


def has_net_underpayment(tax_result: TaxResult) -> bool:
    """Combined federal and state amount owed exceeds the combined refund"""
    total_owed = tax_result.federal_tax.amount_owed + tax_result.state_tax.amount_owed
    total_refund = tax_result.federal_tax.refund + tax_result.state_tax.refund
    return total_owed > total_refund


def ensure_no_net_underpayment(tax_result: TaxResult, product_id: ProductId) -> None:
    """Refuse payable bundles when the filer owes net tax overall"""
    if product_id not in PAYABLE_PRODUCTS or not has_net_underpayment(tax_result):
        return

    total_owed = tax_result.federal_tax.amount_owed + tax_result.state_tax.amount_owed
    total_refund = tax_result.federal_tax.refund + tax_result.state_tax.refund
    metrics_collector.increment_counter("net_underpayment_refusals")
    logger.warning("Package refused for net underpayment",
                  product=product_id.value,
                  total_owed=total_owed,
                  total_refund=total_refund)
    raise NetUnderpaymentError(UNDERPAYMENT_MESSAGE, total_owed=total_owed, total_refund=total_refund)
