"""
Filing Validators - Deterministic validation rules

Runs before any computation or form fill. Errors block the request; warnings
are reported alongside the result.
"""

import re
from datetime import date
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field
import structlog

from f1taxmate.core.exceptions import ValidationError
from f1taxmate.models.filing import FormData
from f1taxmate.models.forms import ProductId
from f1taxmate.services import income_totals

logger = structlog.get_logger()


def digits_only(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


class ValidationReport(BaseModel):
    """Outcome of validating one filing"""
    valid: bool = True
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class FilingValidator:
    """Deterministic filing data validator"""

    def __init__(self):
        self.validation_rules = self._initialize_validation_rules()
        self.product_rules = self._initialize_product_rules()

    def _initialize_validation_rules(self) -> Dict[str, Dict[str, Any]]:
        """Rules applied to every filing"""
        return {
            "income_state_required": {
                "description": "Income state is required when U.S. income was reported",
                "validator": self._validate_income_state,
                "severity": "error"
            },
            "ssn_format": {
                "description": "SSN must be 9 digits",
                "validator": self._validate_ssn,
                "severity": "error"
            },
            "w2_ein_format": {
                "description": "Every W-2 needs a 9-digit EIN",
                "validator": self._validate_w2_eins,
                "severity": "error"
            },
            "visit_entry_dates": {
                "description": "Every visit has an entry date on or before its exit date",
                "validator": self._validate_visit_dates,
                "severity": "error"
            },
            "visit_chronology": {
                "description": "Visits do not overlap and only the last one is open-ended",
                "validator": self._validate_visit_chronology,
                "severity": "error"
            },
            "routing_number_format": {
                "description": "Routing number must be 9 digits",
                "validator": self._validate_routing_number,
                "severity": "error"
            },
            "w2_wages_vs_withholding": {
                "description": "Federal withholding should not exceed wages",
                "validator": self._validate_wages_vs_withholding,
                "severity": "warning"
            },
            "fica_employer_info": {
                "description": "Employer name and address for each W-2 with FICA withheld",
                "validator": self._validate_fica_employer_info,
                "severity": "warning"
            },
        }

    def _initialize_product_rules(self) -> Dict[ProductId, Dict[str, Dict[str, Any]]]:
        """Rules that only block a specific product"""
        return {
            ProductId.FICA: {
                "fica_employer_info": {
                    "description": "Form 8316 needs the employer of each W-2 with FICA withheld",
                    "validator": self._validate_fica_employer_info,
                    "severity": "error"
                },
            },
        }

    def validate(self, form_data: FormData, product_id: Optional[ProductId] = None) -> ValidationReport:
        """
        Validate a filing

        Args:
            form_data: Questionnaire data
            product_id: Product being generated, which may escalate some warnings to errors

        Returns:
            ValidationReport with errors and warnings
        """
        rules = dict(self.validation_rules)
        if product_id is not None:
            rules.update(self.product_rules.get(product_id, {}))

        report = ValidationReport()
        for rule_config in rules.values():
            messages = rule_config["validator"](form_data)
            if not messages:
                continue
            if rule_config["severity"] == "error":
                report.valid = False
                report.errors.extend(messages)
            else:
                report.warnings.extend(messages)

        logger.info("Filing validation completed",
                   valid=report.valid,
                   errors=len(report.errors),
                   warnings=len(report.warnings),
                   product=product_id.value if product_id else None)
        return report

    def _validate_income_state(self, form_data: FormData) -> List[str]:
        income = form_data.income_info
        if income.had_us_income and income.income_state is None:
            return ["Income state is required when U.S. income was reported"]
        return []

    def _validate_ssn(self, form_data: FormData) -> List[str]:
        income = form_data.income_info
        if not income.had_us_income:
            return []
        if len(digits_only(income.ssn)) != 9:
            return ["SSN must be 9 digits"]
        return []

    def _validate_w2_eins(self, form_data: FormData) -> List[str]:
        errors = []
        for index, w2 in enumerate(form_data.income_info.w2_forms, start=1):
            if not w2.ein.strip():
                errors.append(f"W-2 #{index}: EIN is required")
            elif len(digits_only(w2.ein)) != 9:
                errors.append(f"W-2 #{index}: EIN must be 9 digits")
        return errors

    def _validate_visit_dates(self, form_data: FormData) -> List[str]:
        errors = []
        for index, visit in enumerate(form_data.residency_info.visits, start=1):
            if visit.entry_date is None:
                errors.append(f"Visit #{index}: entry date is required")
            elif visit.exit_date is not None and visit.exit_date < visit.entry_date:
                errors.append(f"Visit #{index}: exit date is before entry date")
        return errors

    def _validate_visit_chronology(self, form_data: FormData) -> List[str]:
        visits = [visit for visit in form_data.residency_info.visits if visit.entry_date is not None]
        ordered = sorted(visits, key=lambda visit: visit.entry_date)

        errors = []
        open_ended = [visit for visit in ordered if visit.exit_date is None]
        if len(open_ended) > 1:
            errors.append("Only one visit may be missing an exit date")
        elif open_ended and open_ended[0] is not ordered[-1]:
            errors.append("Only the most recent visit may be missing an exit date")

        for previous, current in zip(ordered, ordered[1:]):
            # Exit day is absent, so re-entering on it does not overlap
            previous_end = previous.exit_date or date.max
            if current.entry_date < previous_end:
                errors.append(
                    f"Visits starting {previous.entry_date.isoformat()} and "
                    f"{current.entry_date.isoformat()} overlap"
                )
        return errors

    def _validate_routing_number(self, form_data: FormData) -> List[str]:
        bank = form_data.income_info.bank_details
        if bank is None or not bank.routing_number.strip():
            return []
        if len(digits_only(bank.routing_number)) != 9:
            return ["Routing number must be 9 digits"]
        return []

    def _validate_wages_vs_withholding(self, form_data: FormData) -> List[str]:
        warnings = []
        for index, w2 in enumerate(form_data.income_info.w2_forms, start=1):
            if w2.federal_tax_withheld > w2.wages:
                warnings.append(f"W-2 #{index}: federal withholding exceeds wages")
        return warnings

    def _validate_fica_employer_info(self, form_data: FormData) -> List[str]:
        income = form_data.income_info
        fica_forms = income_totals.fica_w2_forms(income)
        entries = income.fica_employer_info or []

        messages = []
        for index in range(len(fica_forms)):
            entry = entries[index] if index < len(entries) else None
            if entry is None or not entry.employer_name.strip() or not entry.employer_address.strip():
                messages.append(f"Employer #{index + 1}: name and address are required for Form 8316")
        return messages


filing_validator = FilingValidator()


def ensure_valid(form_data: FormData, product_id: Optional[ProductId] = None) -> ValidationReport:
    """Validate and raise ValidationError when any rule fails"""
    report = filing_validator.validate(form_data, product_id)
    if not report.valid:
        logger.warning("Filing rejected", errors=report.errors)
        raise ValidationError("Filing data is invalid", errors=report.errors)
    return report
