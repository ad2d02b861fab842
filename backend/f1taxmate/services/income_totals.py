"""
Income Totals

Every quantity that appears on more than one document is computed here and
nowhere else, so sibling forms always agree to the dollar.
"""

import math
from decimal import Decimal
from typing import List, NamedTuple

from f1taxmate.models.filing import IncomeInfo, W2Form


class FICATotals(NamedTuple):
    """Social Security and Medicare withheld across the FICA W-2s, whole dollars"""
    social_security: int
    medicare: int
    total: int


def floor_dollars(amount: Decimal) -> int:
    """Round down to whole dollars"""
    return math.floor(amount)


def gross_income(income: IncomeInfo) -> Decimal:
    """W-2 wages + 1099-INT interest + 1099-MISC other income (unrounded)"""
    total = Decimal("0")
    for w2 in income.w2_forms:
        total += w2.wages
    for form in income.form_1099_int:
        total += form.interest_income
    for form in income.form_1099_misc:
        total += form.other_income
    return total


def federal_withheld(income: IncomeInfo) -> Decimal:
    """Federal income tax withheld across all income kinds (unrounded)"""
    total = Decimal("0")
    for w2 in income.w2_forms:
        total += w2.federal_tax_withheld
    for form in income.form_1099_int:
        total += form.federal_tax_withheld
    for form in income.form_1099_misc:
        total += form.federal_tax_withheld
    return total


def illinois_withholding_entries(income: IncomeInfo) -> List[int]:
    """Per-entry state withholding floored to whole dollars, W-2s first, then 1099-INT, then 1099-MISC"""
    entries = [floor_dollars(w2.state_tax_withheld) for w2 in income.w2_forms]
    entries.extend(floor_dollars(form.state_tax_withheld) for form in income.form_1099_int)
    entries.extend(floor_dollars(form.state_tax_withheld) for form in income.form_1099_misc)
    return entries


def illinois_withheld(income: IncomeInfo) -> int:
    """
    Illinois withholding total: the sum of per-entry floored amounts.

    Flooring each entry (not the sum) keeps IL-1040 Line 25 equal to the
    Schedule IL-WIT total.
    """
    return sum(illinois_withholding_entries(income))


def fica_w2_forms(income: IncomeInfo) -> List[W2Form]:
    """W-2s with Social Security or Medicare withheld, in input order"""
    return [w2 for w2 in income.w2_forms if w2.fica_withheld > 0]


def has_fica_withheld(income: IncomeInfo) -> bool:
    return any(w2.fica_withheld > 0 for w2 in income.w2_forms)


def fica_totals(income: IncomeInfo) -> FICATotals:
    social_security = Decimal("0")
    medicare = Decimal("0")
    for w2 in fica_w2_forms(income):
        social_security += w2.social_security_withheld
        medicare += w2.medicare_withheld
    return FICATotals(
        social_security=floor_dollars(social_security),
        medicare=floor_dollars(medicare),
        total=floor_dollars(social_security + medicare),
    )
