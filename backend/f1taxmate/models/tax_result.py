"""
Tax Result Models
"""

from pydantic import BaseModel, Field
from decimal import Decimal


class FederalForms(BaseModel):
    """Federal documents the filer needs"""
    form_8843: bool = True
    form_1040nr: bool = False
    form_843: bool = False  # FICA withheld in error; unlocks the FICA refund claim


class FederalBreakdown(BaseModel):
    """Intermediate federal quantities shown on forms and instruction pages"""
    gross_income: Decimal = Decimal("0")
    standard_deduction: int = 0
    taxable_income: int = 0
    withheld: Decimal = Decimal("0")


class FederalTaxResult(BaseModel):
    """Federal liability; whole dollars"""
    country: str = "india"
    tax_owed: int = Field(0, ge=0)
    refund: int = Field(0, ge=0)
    amount_owed: int = Field(0, ge=0)
    breakdown: FederalBreakdown = Field(default_factory=FederalBreakdown)
    forms: FederalForms = Field(default_factory=FederalForms)

    class Config:
        frozen = True


class StateForms(BaseModel):
    """State documents the filer needs"""
    form_il1040: bool = False


class StateBreakdown(BaseModel):
    """Intermediate state quantities shown on forms and instruction pages"""
    gross_income: Decimal = Decimal("0")
    exemption: int = 0
    taxable_income: int = 0
    withheld: int = 0  # sum of per-entry floored withholding


class StateTaxResult(BaseModel):
    """State liability; whole dollars"""
    state: str = ""
    tax_owed: int = Field(0, ge=0)
    refund: int = Field(0, ge=0)
    amount_owed: int = Field(0, ge=0)
    breakdown: StateBreakdown = Field(default_factory=StateBreakdown)
    forms: StateForms = Field(default_factory=StateForms)

    class Config:
        frozen = True


class TaxResult(BaseModel):
    """Federal and state results for one filing"""
    tax_year: int
    federal_tax: FederalTaxResult
    state_tax: StateTaxResult

    class Config:
        frozen = True


def minimal_tax_result_for_8843(tax_year: int) -> TaxResult:
    """All-zero result for filers without U.S. income (Form 8843 only)"""
    return TaxResult(
        tax_year=tax_year,
        federal_tax=FederalTaxResult(forms=FederalForms(form_8843=True)),
        state_tax=StateTaxResult(),
    )
