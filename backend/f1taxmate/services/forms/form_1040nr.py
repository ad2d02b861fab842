"""
Form 1040-NR - U.S. Nonresident Alien Income Tax Return

Whole-dollar document. Income, deduction and tax lines come from the federal
breakdown on the tax result so they always match the computed liability.
Hardcoded: occupation "Student", and "0" on the two income lines this
population never has.
"""

from f1taxmate.models.forms import FormType
from f1taxmate.services.forms.base import FieldSpec, FilingContext, FormMapper, const
from f1taxmate.services.forms.formatting import digits_only, format_whole_dollars as money

P1 = "topmostSubform[0].Page1[0]"
P2 = "topmostSubform[0].Page2[0]"


def gross(ctx: FilingContext) -> str:
    return money(ctx.tax_result.federal_tax.breakdown.gross_income)


def standard_deduction(ctx: FilingContext) -> str:
    return money(ctx.tax_result.federal_tax.breakdown.standard_deduction)


def tax_owed(ctx: FilingContext) -> str:
    return money(ctx.tax_result.federal_tax.tax_owed)


def withheld(ctx: FilingContext) -> str:
    return money(ctx.tax_result.federal_tax.breakdown.withheld)


def overpaid(ctx: FilingContext) -> str:
    federal = ctx.tax_result.federal_tax
    return money(max(0, federal.breakdown.withheld - federal.tax_owed))


def refund(ctx: FilingContext) -> str:
    federal = ctx.tax_result.federal_tax
    if federal.refund > 0:
        return money(federal.refund)
    return overpaid(ctx)


def bank_value(attribute: str):
    def extract(ctx: FilingContext):
        bank = ctx.income.bank_details
        value = getattr(bank, attribute) if bank else ""
        return value or None
    return extract


def _fields():
    return [
        # Identity and address
        FieldSpec(f"{P1}.f1_14[0]", lambda ctx: ctx.personal.first_name),
        FieldSpec(f"{P1}.f1_15[0]", lambda ctx: ctx.personal.last_name),
        # SSN box takes exactly nine digits, no dashes
        FieldSpec(f"{P1}.f1_16[0]", lambda ctx: digits_only(ctx.income.ssn)),
        FieldSpec(f"{P1}.f1_17[0]", lambda ctx: ctx.personal.us_address.address),
        FieldSpec(f"{P1}.f1_18[0]", lambda ctx: ctx.personal.us_address.address_line2 or None),
        FieldSpec(f"{P1}.f1_19[0]", lambda ctx: ctx.personal.us_address.city),
        FieldSpec(f"{P1}.f1_20[0]", lambda ctx: ctx.personal.us_address.state),
        FieldSpec(f"{P1}.f1_21[0]", lambda ctx: ctx.personal.us_address.zip_code),
        # Income effectively connected with a U.S. trade or business
        FieldSpec(f"{P1}.f1_42[0]", gross, required=True),
        FieldSpec(f"{P1}.f1_54[0]", gross),
        FieldSpec(f"{P1}.f1_56[0]", const("0")),
        FieldSpec(f"{P1}.f1_68[0]", const("0")),
        FieldSpec(f"{P1}.f1_69[0]", gross),
        FieldSpec(f"{P1}.f1_71[0]", gross),
        # Page 2: AGI, treaty standard deduction, taxable income, tax
        FieldSpec(f"{P2}.f2_01[0]", gross),
        FieldSpec(f"{P2}.f2_02[0]", standard_deduction),
        FieldSpec(f"{P2}.f2_06[0]", standard_deduction),
        FieldSpec(f"{P2}.f2_07[0]", lambda ctx: money(ctx.tax_result.federal_tax.breakdown.taxable_income), required=True),
        FieldSpec(f"{P2}.f2_09[0]", tax_owed, required=True),
        FieldSpec(f"{P2}.f2_11[0]", tax_owed),
        FieldSpec(f"{P2}.f2_15[0]", tax_owed),
        FieldSpec(f"{P2}.f2_20[0]", tax_owed, required=True),
        # Payments
        FieldSpec(f"{P2}.Line25_ReadOrder[0].f2_21[0]", withheld, required=True),
        FieldSpec(f"{P2}.f2_24[0]", withheld),
        FieldSpec(f"{P2}.f2_35[0]", withheld),
        # Refund
        FieldSpec(f"{P2}.f2_36[0]", overpaid),
        FieldSpec(f"{P2}.f2_37[0]", refund, required=True),
        FieldSpec(f"{P2}.RoutingNo[0].f2_38[0]", bank_value("routing_number")),
        FieldSpec(f"{P2}.AccountNo[0].f2_39[0]", bank_value("account_number")),
        # Sign here
        FieldSpec(f"{P2}.f2_47[0]", const("Student")),
        FieldSpec(f"{P2}.f2_49[0]", lambda ctx: ctx.personal.phone),
        FieldSpec(f"{P2}.f2_50[0]", lambda ctx: ctx.personal.email),
    ]


form_1040nr_mapper = FormMapper(
    form_type=FormType.FORM_1040NR,
    title="Form 1040-NR",
    fields=_fields(),
)
