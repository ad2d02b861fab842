"""
Form 843 - Claim for Refund and Request for Abatement

Filed to recover Social Security and Medicare tax withheld in error from an
F-1 student's wages. Only the "refund to employee of SS/Medicare tax withheld
in error" reason is checked; Line 4a Employment; Line 5n Other with 1040-NR
on Line 6; Line 7d None of the above; Line 8 carries the explanation.
"""

from f1taxmate.models.forms import FormType
from f1taxmate.services import income_totals
from f1taxmate.services.forms.base import FieldSpec, FilingContext, FormMapper, const
from f1taxmate.services.forms.formatting import format_date, format_ein, format_ssn

P1 = "topmostSubform[0].Page1[0]"
P2 = "topmostSubform[0].Page2[0]"

REASON_BOX_COUNT = 17
REFUND_REASON_INDEX = 4
RETURN_TYPE_BOX_COUNT = 14


def fica_total(ctx: FilingContext) -> str:
    return str(income_totals.fica_totals(ctx.income).total)


def payment_dates(ctx: FilingContext) -> str:
    # Individual pay dates are not collected; the filer attaches a list
    return "See attached" if income_totals.fica_totals(ctx.income).total > 0 else ""


def employer_label(ctx: FilingContext) -> str:
    fica_forms = income_totals.fica_w2_forms(ctx.income)
    ein = format_ein(fica_forms[0].ein) if fica_forms else ""
    return f" (EIN: {ein})" if ein else ""


def explanation(ctx: FilingContext) -> str:
    """Line 8, one sentence group per line so the text sits on the printed rules"""
    totals = income_totals.fica_totals(ctx.income)
    entry = format_date(ctx.residency.date_of_first_visit) or "[MM/DD/YYYY]"
    lines = [
        "I am a nonresident alien present in the United States on an F-1 student visa.",
        f"I first entered the U.S. on {entry} and have been present for fewer than 5 calendar years. "
        "I am classified as a nonresident alien for federal tax purposes under IRC Section 7701(b).",
        "Under Section 3121(b)(19) of the Internal Revenue Code, a nonresident alien on an F-1 visa is "
        "not liable for Social Security and Medicare (FICA) taxes for as long as they remain a nonresident alien.",
        f"My employer{employer_label(ctx)} mistakenly withheld FICA taxes from my wages during the "
        f"{ctx.tax_year} tax year. The employer erroneously deducted these taxes from my compensation "
        "despite my exempt status.",
        f"Social Security tax withheld (W-2 Box 4): ${totals.social_security}. "
        f"Medicare tax withheld (W-2 Box 6): ${totals.medicare}. "
        f"Total refund requested: ${totals.total}.",
        "I contacted my employer and requested a refund of these erroneously withheld taxes. "
        "My employer was unable to process the refund and advised me to apply directly with the "
        "Internal Revenue Service.",
        "I have not received any reimbursement from my employer for these amounts. I have not claimed "
        "these amounts as a credit against, or refund of, my federal income tax on any return.",
    ]
    return "\n".join(lines)


def _fields():
    fields = []

    for index in range(REASON_BOX_COUNT):
        fields.append(FieldSpec(f"{P1}.c1_1[{index}]", const(index == REFUND_REASON_INDEX)))

    # Taxpayer information; f1_1 is the "Other (specify)" reason and stays empty
    fields.extend([
        FieldSpec(f"{P1}.f1_2[0]", lambda ctx: ctx.personal.full_name),
        FieldSpec(f"{P1}.f1_3[0]", lambda ctx: format_ssn(ctx.income.ssn)),
        FieldSpec(f"{P1}.f1_6[0]", lambda ctx: ctx.personal.us_address.address),
        FieldSpec(f"{P1}.f1_7[0]", lambda ctx: ctx.personal.us_address.address_line2 or ""),
        FieldSpec(f"{P1}.f1_8[0]", lambda ctx: ctx.personal.us_address.city),
        FieldSpec(f"{P1}.f1_9[0]", lambda ctx: ctx.personal.us_address.state),
        FieldSpec(f"{P1}.f1_10[0]", lambda ctx: ctx.personal.us_address.zip_code),
        FieldSpec(f"{P1}.f1_16[0]", lambda ctx: ctx.personal.phone),
        # Line 1: tax period
        FieldSpec(f"{P1}.f1_17[0]", lambda ctx: f"01/01/{ctx.tax_year}"),
        FieldSpec(f"{P1}.f1_18[0]", lambda ctx: f"12/31/{ctx.tax_year}"),
        # Line 2: amount to be refunded
        FieldSpec(f"{P1}.f1_19[0]", fica_total, required=True),
        # Line 3a-3l: dates of payment
        FieldSpec(f"{P1}.f1_20[0]", payment_dates),
    ])
    for number in range(21, 32):
        fields.append(FieldSpec(f"{P1}.f1_{number}[0]", const("")))

    # Line 4: type of tax, Employment only
    fields.append(FieldSpec(f"{P1}.c1_2[0]", const(True)))
    for number in range(3, 9):
        fields.append(FieldSpec(f"{P1}.c1_{number}[0]", const(False)))

    # Line 5: type of return, 5n Other only
    for number in range(1, RETURN_TYPE_BOX_COUNT + 1):
        fields.append(FieldSpec(f"{P2}.c2_{number}[0]", const(number == RETURN_TYPE_BOX_COUNT)))

    fields.extend([
        FieldSpec(f"{P2}.f2_1[0]", const("1040-NR")),
        FieldSpec(f"{P2}.f2_2[0]", const("")),
    ])

    # Line 7: 7d None of the above
    for index in range(3):
        fields.append(FieldSpec(f"{P2}.c2_15[{index}]", const(False)))
    fields.append(FieldSpec(f"{P2}.c2_15[3]", const(True)))

    fields.extend([
        FieldSpec(f"{P2}.ExplainWhy[0].f2_3[0]", explanation, required=True),
        # Signature block; IP PIN left empty
        FieldSpec(f"{P2}.f2_4[0]", lambda ctx: ctx.personal.full_name),
        FieldSpec(f"{P2}.f2_5[0]", lambda ctx: format_date(ctx.prepared_on)),
        FieldSpec(f"{P2}.f2_6[0]", const("")),
    ])
    return fields


form_843_mapper = FormMapper(
    form_type=FormType.FORM_843,
    title="Form 843",
    fields=_fields(),
)
