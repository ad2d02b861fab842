"""
Form IL-1040 - Illinois Individual Income Tax Return

Whole-dollar document (the form prints ".00"). Filing status Single,
residency Nonresident. Every amount comes from the state breakdown on the
tax result; Line 25 (withholding) is the same total the Schedule IL-WIT
prints, so the two never disagree.
"""

from f1taxmate.models.filing import AccountType
from f1taxmate.models.forms import FormType
from f1taxmate.services.forms.base import FieldSpec, FilingContext, FormMapper, const
from f1taxmate.services.forms.formatting import (
    format_date,
    format_ssn,
    format_whole_dollars as money,
    split_phone,
)

ZERO = const("0")

COUNTY_ALTERNATES = ("County", "county", "County (Illinois only)")

# Lines this population never has an amount on
ZERO_LINES = [
    "Federally tax-exempt interest",
    "Other additions",
    "step3-5",
    "step3-6",
    "step3-7",
    "Total of your subtractions",
    "65 or older exemption amount",
    "Legally blind exemption amount",
    "Claiming dependents",
    "Recapture of investment tax credits",
    "Income tax paid to another state",
    "Schedule ICR",
    "Credit amount from Schedule 1299-C",
    "Total of your credits",
    "Household employment tax",
    "Use tax",
    "Compassionate Use of Medical Cannabis Program Act",
    "Estimated payments",
    "Pass-through withholding",
    "Pass-through entity tax credit",
    "Earned Income Tax Credit from Schedule IL-E/EIC",
    "Child Tax credit from Sch.IL-EITC",
    "Late-payment penalty for underpayment",
    "Voluntary charitable donations",
    "Total penalty and donations",
    "Amount to be credited forwarded",
]


def state_amount(attribute: str):
    return lambda ctx: money(getattr(ctx.tax_result.state_tax, attribute))


def breakdown_amount(attribute: str):
    return lambda ctx: money(getattr(ctx.tax_result.state_tax.breakdown, attribute))


def refund_deposit(attribute: str):
    """Direct deposit details, only when a refund is due"""
    def extract(ctx: FilingContext):
        bank = ctx.income.bank_details
        if bank is None or ctx.tax_result.state_tax.refund <= 0:
            return None
        return getattr(bank, attribute)
    return extract


def checking_account(ctx: FilingContext):
    bank = ctx.income.bank_details
    if bank is None or ctx.tax_result.state_tax.refund <= 0:
        return None
    return bank.account_type == AccountType.CHECKING


def _fields():
    gross = breakdown_amount("gross_income")
    exemption = breakdown_amount("exemption")
    withheld = breakdown_amount("withheld")
    tax_owed = state_amount("tax_owed")
    refund = state_amount("refund")
    amount_owed = state_amount("amount_owed")

    fields = [
        # Step 1: personal information
        FieldSpec("step1-A-firstnamemi", lambda ctx: ctx.personal.first_name),
        FieldSpec("step1-A-lastname", lambda ctx: ctx.personal.last_name),
        FieldSpec("Step1-A-dob", lambda ctx: format_date(ctx.personal.date_of_birth)),
        FieldSpec("step1-A-ssn", lambda ctx: format_ssn(ctx.income.ssn)),
        FieldSpec("step1-A-mailingaddress", lambda ctx: ctx.personal.us_address.address),
        FieldSpec("step1-A-aptno", lambda ctx: ctx.personal.us_address.address_line2 or ""),
        FieldSpec("step1-A-city", lambda ctx: ctx.personal.us_address.city),
        FieldSpec("step1-A-state", lambda ctx: ctx.personal.us_address.state),
        FieldSpec("step1-A-zip", lambda ctx: ctx.personal.us_address.zip_code),
        FieldSpec("step1-A-county", lambda ctx: ctx.personal.us_address.county or "",
                  alternates=COUNTY_ALTERNATES),
        FieldSpec("step1-A-email", lambda ctx: ctx.personal.email),
        FieldSpec("filing_status", const(True)),
        FieldSpec("residency", const(True)),
        # Step 2-4: income, base income, exemptions
        FieldSpec("Federally adjusted income", gross, required=True),
        FieldSpec("Total income", gross),
        FieldSpec("Illinois base income", gross),
        FieldSpec("Exemption amount", exemption),
        FieldSpec("Exemption allowance", exemption, required=True),
        # Step 5-6: net income and tax
        FieldSpec("Illinois net income from Schedule NR", breakdown_amount("taxable_income"), required=True),
        FieldSpec("Multiply residency rate", tax_owed),
        FieldSpec("Income tax", tax_owed),
        FieldSpec("Tax after nonrefundable credits", tax_owed),
        FieldSpec("Total Tax", tax_owed, required=True),
        # Step 7-8: payments
        FieldSpec("Total tax from Page 1", tax_owed),
        FieldSpec("Illinois Income Tax withheld", withheld, required=True),
        FieldSpec("Total payments and refundable credit", withheld),
        # Step 9-11: refund or amount owed
        FieldSpec("If Line 31 is greater", refund),
        FieldSpec("If Line 24 is greater", amount_owed),
        FieldSpec("Overpayment amount", refund),
        FieldSpec("Refunded to you", refund, required=True),
        FieldSpec("Routing number", refund_deposit("routing_number")),
        FieldSpec("Account number", refund_deposit("account_number")),
        FieldSpec("account_type", checking_account),
        FieldSpec("Amount you owe", amount_owed, required=True),
        # Signature area
        FieldSpec("date_2", lambda ctx: format_date(ctx.prepared_on)),
        FieldSpec("DaytimeAreaCode_1", lambda ctx: split_phone(ctx.personal.phone).area_code),
        FieldSpec("phone_number_1", lambda ctx: split_phone(ctx.personal.phone).number),
    ]

    for name in ZERO_LINES:
        fields.append(FieldSpec(name, ZERO))

    return fields


il_1040_mapper = FormMapper(
    form_type=FormType.FORM_IL1040,
    title="Form IL-1040",
    fields=_fields(),
)
