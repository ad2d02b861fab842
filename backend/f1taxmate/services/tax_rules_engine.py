"""
Tax Rules Engine for F-1 Nonresident Tax Calculations
Deterministic federal (treaty country) and state rules, selected by jurisdiction
"""

import math
from decimal import Decimal
from typing import Dict, Any, List, Optional
from enum import Enum
import structlog

from f1taxmate.core.config import settings
from f1taxmate.core.exceptions import (
    F1TaxMateError,
    TaxComputationError,
    UnsupportedJurisdictionError,
)
from f1taxmate.models.filing import FormData, IncomeInfo, IncomeState
from f1taxmate.models.tax_result import (
    FederalBreakdown,
    FederalForms,
    FederalTaxResult,
    StateBreakdown,
    StateForms,
    StateTaxResult,
    TaxResult,
    minimal_tax_result_for_8843,
)
from f1taxmate.services import income_totals

logger = structlog.get_logger()


class TaxTreatyCountry(str, Enum):
    INDIA = "india"


class StateCode(str, Enum):
    ILLINOIS = "Illinois"


# Spellings of the residence country that select the India treaty rule;
# an empty country defaults to India.
COUNTRY_ALIASES: Dict[str, TaxTreatyCountry] = {
    "india": TaxTreatyCountry.INDIA,
    "indian": TaxTreatyCountry.INDIA,
    "": TaxTreatyCountry.INDIA,
    "foreign country": TaxTreatyCountry.INDIA,
}


class IndiaTreatyRule:
    """
    Federal rule for Indian F-1 students (Form 1040-NR, single filer).

    India-US treaty Article 21(2) allows the standard deduction that is
    otherwise denied to nonresident aliens.
    """

    country = TaxTreatyCountry.INDIA

    def __init__(self):
        self.standard_deduction = 15750
        self.tax_brackets = self._load_tax_brackets()

    def _load_tax_brackets(self) -> List[Dict[str, Any]]:
        """2025 single-filer brackets; both bounds inclusive, base is the tax below min"""
        return [
            {"min": 0, "max": 11925, "rate": Decimal("0.10"), "base": Decimal("0")},
            {"min": 11926, "max": 48475, "rate": Decimal("0.12"), "base": Decimal("1192.50")},
            {"min": 48476, "max": 103350, "rate": Decimal("0.22"), "base": Decimal("5578.50")},
            {"min": 103351, "max": 197300, "rate": Decimal("0.24"), "base": Decimal("17651.00")},
            {"min": 197301, "max": 250525, "rate": Decimal("0.32"), "base": Decimal("40199.00")},
            {"min": 250526, "max": 626350, "rate": Decimal("0.35"), "base": Decimal("57231.00")},
            {"min": 626351, "max": None, "rate": Decimal("0.37"), "base": Decimal("188769.75")},
        ]

    def progressive_tax(self, taxable_income: int) -> Decimal:
        """Bracket base + (taxable income - bracket min) x marginal rate"""
        if taxable_income <= 0:
            return Decimal("0")

        for bracket in self.tax_brackets:
            upper = bracket["max"]
            if bracket["min"] <= taxable_income and (upper is None or taxable_income <= upper):
                return bracket["base"] + (taxable_income - bracket["min"]) * bracket["rate"]

        return Decimal("0")

    def compute(self, income: IncomeInfo) -> FederalTaxResult:
        gross = income_totals.gross_income(income)
        withheld = income_totals.federal_withheld(income)

        taxable_income = math.floor(max(Decimal("0"), gross - self.standard_deduction))
        tax_owed = math.floor(self.progressive_tax(taxable_income))

        refund = math.floor(max(Decimal("0"), withheld - tax_owed))
        amount_owed = math.floor(max(Decimal("0"), tax_owed - withheld))

        return FederalTaxResult(
            country=self.country.value,
            tax_owed=tax_owed,
            refund=refund,
            amount_owed=amount_owed,
            breakdown=FederalBreakdown(
                gross_income=gross,
                standard_deduction=self.standard_deduction,
                taxable_income=taxable_income,
                withheld=withheld,
            ),
            forms=FederalForms(
                form_8843=True,
                form_1040nr=income.had_us_income,
                form_843=income_totals.has_fica_withheld(income),
            ),
        )


class IllinoisRule:
    """Illinois flat-rate income tax with the single-filer personal exemption"""

    state = StateCode.ILLINOIS

    def __init__(self):
        self.rate = Decimal("0.0495")
        self.exemption_allowance = 2850
        # Exemption is lost entirely above this base income (no phase-in)
        self.exemption_income_limit = Decimal("250000")

    def exemption_for(self, gross_income: Decimal) -> int:
        return 0 if gross_income > self.exemption_income_limit else self.exemption_allowance

    def compute(self, income: IncomeInfo) -> StateTaxResult:
        gross = income_totals.gross_income(income)
        exemption = self.exemption_for(gross)
        taxable_income = math.floor(max(Decimal("0"), gross - exemption))
        tax_owed = math.floor(taxable_income * self.rate)
        withheld = income_totals.illinois_withheld(income)

        return StateTaxResult(
            state=self.state.value,
            tax_owed=tax_owed,
            refund=max(0, withheld - tax_owed),
            amount_owed=max(0, tax_owed - withheld),
            breakdown=StateBreakdown(
                gross_income=gross,
                exemption=exemption,
                taxable_income=taxable_income,
                withheld=withheld,
            ),
            forms=StateForms(form_il1040=income.had_us_income),
        )


class TaxRulesEngine:
    """Selects and runs the federal and state rule for a filing"""

    def __init__(self, tax_year: Optional[int] = None):
        self.tax_year = tax_year or settings.TAX_YEAR
        self.ruleset_version = f"v{self.tax_year}.1"

        self.federal_rules = {TaxTreatyCountry.INDIA: IndiaTreatyRule()}
        self.state_rules = {StateCode.ILLINOIS: IllinoisRule()}

    def resolve_country(self, country: Optional[str]) -> TaxTreatyCountry:
        """Map the residence country entered by the filer to a supported treaty country"""
        key = (country or "").strip().lower()
        if key in COUNTRY_ALIASES:
            return COUNTRY_ALIASES[key]
        raise UnsupportedJurisdictionError(
            f"Federal tax calculation not yet supported for {country} students. "
            "Currently only India is supported.",
            jurisdiction=country or "",
            kind="country",
        )

    def resolve_state(self, state: str) -> StateCode:
        for code in StateCode:
            if state == code.value:
                return code
        raise UnsupportedJurisdictionError(
            f"State tax calculation not supported for {state}. Currently only Illinois is supported.",
            jurisdiction=state,
            kind="state",
        )

    def calculate_federal_tax(self, income: IncomeInfo, country: Optional[str]) -> FederalTaxResult:
        """
        Calculate federal liability for the treaty country

        Args:
            income: Income and withholding
            country: Residence country as entered

        Returns:
            Federal tax result (whole dollars)
        """
        rule = self.federal_rules[self.resolve_country(country)]
        try:
            result = rule.compute(income)
            logger.info("Federal tax computed",
                       country=result.country,
                       taxable_income=result.breakdown.taxable_income,
                       tax_owed=result.tax_owed,
                       refund=result.refund,
                       amount_owed=result.amount_owed)
            return result

        except F1TaxMateError:
            raise
        except Exception as e:
            logger.error("Federal tax calculation failed", error=str(e))
            raise TaxComputationError(f"Failed to calculate federal tax: {str(e)}") from e

    def calculate_state_tax(self, income: IncomeInfo, state: str) -> StateTaxResult:
        """Calculate state liability for a supported state"""
        rule = self.state_rules[self.resolve_state(state)]
        try:
            result = rule.compute(income)
            logger.info("State tax computed",
                       state=result.state,
                       taxable_income=result.breakdown.taxable_income,
                       tax_owed=result.tax_owed,
                       withheld=result.breakdown.withheld)
            return result

        except F1TaxMateError:
            raise
        except Exception as e:
            logger.error("State tax calculation failed", error=str(e), state=state)
            raise TaxComputationError(f"Failed to calculate state tax: {str(e)}") from e

    def compute_tax(self, form_data: FormData) -> TaxResult:
        """
        Compute the complete filing result

        Filers without U.S. income get all-zero results (Form 8843 only). The
        state rule only runs when income was earned in Illinois; otherwise the
        state result is an all-zero placeholder.
        """
        income = form_data.income_info
        logger.info("Computing tax result", tax_year=self.tax_year, ruleset_version=self.ruleset_version)

        if not income.had_us_income:
            return minimal_tax_result_for_8843(self.tax_year)

        federal = self.calculate_federal_tax(income, form_data.personal_info.foreign_address.country)

        if income.income_state == IncomeState.ILLINOIS:
            state = self.calculate_state_tax(income, StateCode.ILLINOIS.value)
        else:
            state = StateTaxResult()

        return TaxResult(tax_year=self.tax_year, federal_tax=federal, state_tax=state)


# Global tax rules engine instance
def get_tax_rules_engine(tax_year: Optional[int] = None) -> TaxRulesEngine:
    """Get tax rules engine instance for specific year"""
    return TaxRulesEngine(tax_year=tax_year)
