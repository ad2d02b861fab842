"""
Form 8316 - Information Regarding Request for Refund of Social Security Tax
Erroneously Withheld on Wages Received by a Nonresident Alien on F, J, or M Visa

Hardcoded answers: A Yes; 1 No; 3 No; 5 Do not know; 7 No.
The template has no separate employer name/address field, so employer
details head the statement block.
"""

from typing import List

from f1taxmate.models.forms import FormType, RadioChoice
from f1taxmate.services import income_totals
from f1taxmate.services.forms.base import FieldSpec, FilingContext, FormMapper, const
from f1taxmate.services.forms.formatting import format_ein

CALL_HOURS = "9:00 AM - 5:00 PM CST"

STATEMENT_WITH_ACKNOWLEDGEMENT = (
    "I requested a written statement from my employer regarding the erroneously withheld Social "
    "Security and Medicare taxes. My employer acknowledged that the FICA taxes were mistakenly "
    "withheld from my wages but was unable to process a refund or provide a formal written "
    "statement. They advised me to apply directly with the Internal Revenue Service for a refund "
    "of these amounts."
)

STATEMENT = (
    "I requested a written statement from my employer regarding the erroneously withheld Social "
    "Security and Medicare taxes. My employer was unable to process a refund or provide a formal "
    "written statement. They advised me to apply directly with the Internal Revenue Service for a "
    "refund of these amounts."
)


def employer_blocks(ctx: FilingContext) -> List[str]:
    """
    One block per FICA W-2, paired by position with the employer details

    The i-th employer entry describes the i-th W-2 that had FICA withheld,
    not the i-th W-2 overall.
    """
    employers = ctx.income.fica_employer_info or []
    blocks = []
    for index, w2 in enumerate(income_totals.fica_w2_forms(ctx.income)):
        employer = employers[index] if index < len(employers) else None
        name = employer.employer_name.strip() if employer else ""
        address = employer.employer_address.strip() if employer else ""
        parts = [name, address, f"EIN: {format_ein(w2.ein)}"]
        blocks.append("\n".join(part for part in parts if part))
    return blocks


def employer_header(ctx: FilingContext) -> str:
    employers = ctx.income.fica_employer_info or []
    if any(entry.employer_name.strip() or entry.employer_address.strip() for entry in employers):
        return "\n\n".join(employer_blocks(ctx))
    return "\n\n".join(
        f"See attached W-2 for employer name and address. EIN: {format_ein(w2.ein)}"
        for w2 in income_totals.fica_w2_forms(ctx.income)
    )


def employer_statement(ctx: FilingContext) -> str:
    if income_totals.fica_w2_forms(ctx.income):
        statement = STATEMENT_WITH_ACKNOWLEDGEMENT
    else:
        statement = STATEMENT
    return f"{employer_header(ctx)}\n\n{statement}"


def _fields():
    return [
        # A: income directly related to course of studies
        FieldSpec("A", const(RadioChoice(option="1"))),
        # 1: employer paid you back
        FieldSpec("1", const(RadioChoice(option="2"))),
        FieldSpec("FillText01", const("")),
        # 3: authorized employer to claim
        FieldSpec("3", const(RadioChoice(option="2"))),
        FieldSpec("FillText03", const("")),
        # 5: employer claimed any part
        FieldSpec("5", const(RadioChoice(option="3"))),
        FieldSpec("FillText05", const("")),
        FieldSpec("FillText06", const("")),
        # 7: claimed as credit on income tax return
        FieldSpec("7", const(RadioChoice(option="2"))),
        FieldSpec("FillText10", const("")),
        FieldSpec("FillText7", employer_statement, required=True),
        FieldSpec("FillText12", lambda ctx: ctx.personal.phone),
        FieldSpec("FillText11", const(CALL_HOURS)),
    ]


form_8316_mapper = FormMapper(
    form_type=FormType.FORM_8316,
    title="Form 8316",
    fields=_fields(),
)
