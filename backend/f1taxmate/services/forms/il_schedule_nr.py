"""
Schedule NR - Nonresident and Part-Year Resident Computation of Illinois Tax

Field names are the template's full line captions (spacing included).
All income is treated as Illinois-source, so the Illinois portion equals the
federal total.
"""

from f1taxmate.models.forms import FormType
from f1taxmate.services.forms.base import FieldSpec, FormMapper, const
from f1taxmate.services.forms.formatting import format_whole_dollars as money, split_ssn

ZERO = const("0")

FULL_YEAR_RESIDENT = (
    'Step 1: Line 1 - check if you or your spouse  if "married filing jointly," '
    "were a full year resident of Illinois during the tax year?"
)

WAGES_FEDERAL = (
    "Step 3: Line 5 - Column A Federal Total from  Wages, salaries, tips, etc. "
    "(federal Form 1040 or 1040-SR, Line 1z)"
)
WAGES_ILLINOIS = (
    "Step 3: Line 5 - Column B Illinois Portion from  Wages, salaries, tips, etc. "
    "(federal Form 1040 or 1040-SR, Line 1z)"
)
ILLINOIS_TOTAL_INCOME = (
    "Step 3: Line 20 - Column B Illinois Portion add Column B, Lines 5 through 19. "
    "This is the Illinois portion of your federal total income"
)
AGI_FEDERAL = (
    "Step 3: Line 37 - Columm A Federal Total Enter your adjusted gross income as reported "
    "on your Form IL-1040, Line 1"
)
AGI_ILLINOIS = (
    "Line 38: Column B Illinois Portion Subtract Line 36 from Line 21.   "
    "This is the Illinois portion of your federal adjusted gross income"
)
ILLINOIS_PORTION_TOTAL = (
    "Step 4: Line 41 - Column B Illinois Portion Add Column B, Lines 38, 39, and 40. "
    "This is the Illinois portion of your total income"
)
LINE_46 = (
    "Step 5: Line 46 - Subtract Line 45 from Line 41. If Line 45 is larger than Line 41, "
    "enter zero. This is your illinois base income.  If line 46 is zero, skip Lines 47 "
    'through 51, and enter "0" on line 52'
)
LINE_47 = "Step 5: Line 47 - Enter the base income from Form IL-1040, Line 9"
LINE_48_DECIMAL = (
    "Step 5: Line 48 - Divide Line 46 by Line 47 (round to three decimal places). "
    "Enter the appropriate decimal.  If Line 46 is greater than Line 47, enter 1.000"
)
LINE_49 = "Step 5: Line 49 - Enter your exemption allowance from your Form IL-1040, Line 10"
LINE_50 = (
    "Step 5: Line 50 - Multiply Line 49 by the decimal on Line 48. "
    "This is your Illinois exemption allowance"
)
LINE_51 = (
    "Step 5: Line 51 - Subtract Line 50 from Line 46. This is your Illinois net income.  "
    "Enter the amount here and on your Form IL-1040, line 11"
)
LINE_52 = (
    "Step 5: Line 52 - Multiply the amount on Line 51 by 4.95% ( 0.0495). This amount may "
    "not be less than zero. Enter the amount here and on your Form IL-1040, Line 12. "
    "This is your tax"
)

ZERO_LINES = [
    "Step 3: Line 6 - Column A Federal Total from Taxable interest "
    "(federal Form 1040 or 1040-SR, Line 2b)",
    "Step 3: Line 6 - Column B Illinois Portion from Taxable interest "
    "(federal Form 1040 or 1040-SR, Line 2b)",
    "Step 3: Line 19 - Column A Federal Total from Other income  See instructions.  "
    "(federal Form 1040 or 1040-SR, Schedule 1, Line 9) Include winnings from the Illinois "
    "State Lottery as Illinois income in Column B",
    "Step 3: Line 19 - Column B Illinois Portion from Other income.  See instructions.  "
    "(federal Form 1040 or 1040-SR, Schedule 1, Line 9) Include winnings from the Illinois "
    "State Lottery as Illinois income in Column B",
    "Step 3: Line 25 - Column A Federal Total from Moving expenses for members of the Armed "
    "Forces (federal Form 1040 or 1040-SR, Schedule 1, Line 14)",
    "Step 3: Line 25 - Column B Illinois Portion Moving expenses for members of the Armed "
    "Forces (federal Form 1040 or 1040-SR, Schedule 1, Line 14)",
    "Step 3: Line 35 - Column A Federal Total from Other adjustments (see instructions)",
    "Step 3: Line 35 - Column B Illinois Portion from Other adjustments (see instructions)",
    "Step 4: Line 42 - Column A Form IL-1040 Total from Federally taxed Social Security and "
    "retirement income (Form IL-1040, Line 5)",
]


def _fields():
    gross = lambda ctx: money(ctx.tax_result.state_tax.breakdown.gross_income)
    taxable = lambda ctx: money(ctx.tax_result.state_tax.breakdown.taxable_income)
    exemption = lambda ctx: money(ctx.tax_result.state_tax.breakdown.exemption)

    fields = [
        FieldSpec("Attach to your Form IL1040", lambda ctx: ctx.personal.full_name),
        FieldSpec("Your SSN-3", lambda ctx: split_ssn(ctx.income.ssn)[0]),
        FieldSpec("Your SSN-2", lambda ctx: split_ssn(ctx.income.ssn)[1]),
        FieldSpec("Your SSN-4", lambda ctx: split_ssn(ctx.income.ssn)[2]),
        FieldSpec(FULL_YEAR_RESIDENT, const(False)),
        # Step 3: income
        FieldSpec(WAGES_FEDERAL, gross),
        FieldSpec(WAGES_ILLINOIS, gross),
        FieldSpec(ILLINOIS_TOTAL_INCOME, gross),
        FieldSpec(AGI_FEDERAL, gross),
        FieldSpec(AGI_ILLINOIS, gross),
        FieldSpec(ILLINOIS_PORTION_TOTAL, gross),
        # Step 5: Illinois base income, exemption, net income and tax
        FieldSpec(LINE_46, taxable, required=True),
        FieldSpec(LINE_47, gross),
        # Line 48 prints "1.000": whole part and decimal part are separate boxes
        FieldSpec("step5-48", const("1")),
        FieldSpec(LINE_48_DECIMAL, const("000")),
        FieldSpec(LINE_49, exemption),
        FieldSpec(LINE_50, exemption),
        FieldSpec(LINE_51, taxable, required=True),
        FieldSpec(LINE_52, lambda ctx: money(ctx.tax_result.state_tax.tax_owed), required=True),
    ]

    for name in ZERO_LINES:
        fields.append(FieldSpec(name, ZERO))

    return fields


il_schedule_nr_mapper = FormMapper(
    form_type=FormType.FORM_IL1040_SCHEDULE_NR,
    title="Schedule NR",
    fields=_fields(),
)
