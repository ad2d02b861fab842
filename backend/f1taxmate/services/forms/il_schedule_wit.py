"""
Schedule IL-WIT - Illinois Income Tax Withheld

One row per withholding document: W-2s (code W) first, then 1099-INT (I)
and 1099-MISC (M) entries that actually withheld Illinois tax. The total
line is the shared Illinois withholding figure, identical to IL-1040
Line 25.
"""

from typing import List, NamedTuple
import structlog

from f1taxmate.models.forms import FormType
from f1taxmate.services import income_totals
from f1taxmate.services.forms.base import FieldSpec, FilingContext, FormMapper
from f1taxmate.services.forms.formatting import (
    digits_only,
    format_whole_dollars as money,
    split_ssn,
)

logger = structlog.get_logger()

MAX_ROWS = 5


class WithholdingRow(NamedTuple):
    code: str
    ein: str
    federal_wages: str
    illinois_wages: str
    illinois_withheld: int


def withholding_rows(ctx: FilingContext) -> List[WithholdingRow]:
    """All rows in print order, before the template's row limit is applied"""
    income = ctx.income
    rows = [
        WithholdingRow(
            code="W",
            ein=digits_only(w2.ein),
            federal_wages=money(w2.wages),
            illinois_wages=money(w2.wages),
            illinois_withheld=income_totals.floor_dollars(w2.state_tax_withheld),
        )
        for w2 in income.w2_forms
    ]

    for code, forms, amount_of in (
        ("I", income.form_1099_int, lambda form: form.interest_income),
        ("M", income.form_1099_misc, lambda form: form.other_income),
    ):
        for form in forms:
            withheld = income_totals.floor_dollars(form.state_tax_withheld)
            if withheld <= 0:
                continue
            rows.append(WithholdingRow(
                code=code,
                ein=digits_only(form.payer_tin),
                federal_wages=money(amount_of(form)),
                illinois_wages=money(amount_of(form)),
                illinois_withheld=withheld,
            ))

    return rows


def row_cell(index: int, attribute: str):
    def extract(ctx: FilingContext):
        rows = withholding_rows(ctx)
        if index >= len(rows):
            return None
        if index == 0 and len(rows) > MAX_ROWS:
            logger.warning("More withholding entries than Schedule IL-WIT rows",
                          entries=len(rows),
                          rows=MAX_ROWS)
        return str(getattr(rows[index], attribute))
    return extract


def _fields():
    fields = [
        FieldSpec("Your name", lambda ctx: ctx.personal.full_name),
        FieldSpec("Your SSN-3", lambda ctx: split_ssn(ctx.income.ssn)[0]),
        FieldSpec("Your SSN-2", lambda ctx: split_ssn(ctx.income.ssn)[1]),
        FieldSpec("Your SSN-4", lambda ctx: split_ssn(ctx.income.ssn)[2]),
    ]

    for index in range(MAX_ROWS):
        n = index + 1
        fields.extend([
            FieldSpec(f"Form type - {n}", row_cell(index, "code")),
            FieldSpec(f"EIN - {n}", row_cell(index, "ein")),
            FieldSpec(f"Federal wages - {n}", row_cell(index, "federal_wages")),
            FieldSpec(f"Illinois wages - {n}", row_cell(index, "illinois_wages")),
            FieldSpec(f"Illinois withheld - {n}", row_cell(index, "illinois_withheld")),
        ])

    fields.append(FieldSpec(
        "Total amount",
        lambda ctx: str(income_totals.illinois_withheld(ctx.income)),
        required=True,
    ))
    return fields


il_schedule_wit_mapper = FormMapper(
    form_type=FormType.FORM_IL1040_SCHEDULE_IL_WIT,
    title="Schedule IL-WIT",
    fields=_fields(),
)
