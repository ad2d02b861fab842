"""
Form 1040-NR Schedule OI - Other Information (f1040nro.pdf)

Hardcoded answers: No to questions c1_1-c1_4, c1_7, c1_9, c1_11, c1_12;
Yes to c1_6 (has filed a U.S. return before or is otherwise required to).
Computed: identity, Line G travel table, days of presence, prior filing.
Questions without a mapping are left at the template default.
"""

from f1taxmate.models.forms import FormType
from f1taxmate.services.days_calculator import travel_segments
from f1taxmate.services.forms.base import FieldSpec, FilingContext, FormMapper, const
from f1taxmate.services.forms.formatting import format_date_short_year, format_ssn

P = "form1040-NR[0].Page1[0]"

# Line G: two tables of four rows, (date entered, date departed)
LINE_G_ROWS = [
    ("LineG_Table1[0].BodyRow1[0].f1_7[0]", "LineG_Table1[0].BodyRow1[0].f1_8[0]"),
    ("LineG_Table1[0].BodyRow2[0].f1_9[0]", "LineG_Table1[0].BodyRow2[0].f1_10[0]"),
    ("LineG_Table1[0].BodyRow3[0].f1_11[0]", "LineG_Table1[0].BodyRow3[0].f1_12[0]"),
    ("LineG_Table1[0].BodyRow4[0].f1_13[0]", "LineG_Table1[0].BodyRow4[0].f1_14[0]"),
    ("LineG_Table2[0].BodyRow1[0].f1_15[0]", "LineG_Table2[0].BodyRow1[0].f1_16[0]"),
    ("LineG_Table2[0].BodyRow2[0].f1_17[0]", "LineG_Table2[0].BodyRow2[0].f1_18[0]"),
    ("LineG_Table2[0].BodyRow3[0].f1_19[0]", "LineG_Table2[0].BodyRow3[0].f1_20[0]"),
    ("LineG_Table2[0].BodyRow4[0].f1_21[0]", "LineG_Table2[0].BodyRow4[0].f1_22[0]"),
]

NO_QUESTIONS = ["c1_1", "c1_2", "c1_3", "c1_4", "c1_7", "c1_9", "c1_11", "c1_12"]


def line_g_cell(row: int, departed: bool):
    def extract(ctx: FilingContext):
        segments = travel_segments(ctx.residency.visits, ctx.tax_year)
        if row >= len(segments):
            return None
        segment = segments[row]
        if departed:
            return format_date_short_year(segment.exit)
        return format_date_short_year(segment.entry)
    return extract


def prior_filing(ctx: FilingContext):
    residency = ctx.residency
    if residency.has_filed_tax_return_before and residency.year_filed and residency.form_used:
        return f"{residency.year_filed}, {residency.form_used}"
    return None


def _fields():
    fields = [
        FieldSpec(f"{P}.f1_1[0]", lambda ctx: ctx.personal.full_name),
        FieldSpec(f"{P}.f1_2[0]", lambda ctx: format_ssn(ctx.income.ssn)),
        # Country of citizenship and of residence
        FieldSpec(f"{P}.f1_3[0]", lambda ctx: ctx.personal.foreign_address.country),
        FieldSpec(f"{P}.f1_4[0]", lambda ctx: ctx.personal.foreign_address.country),
        FieldSpec(f"{P}.f1_5[0]", lambda ctx: ctx.personal.visa_type),
    ]

    for question in NO_QUESTIONS:
        fields.append(FieldSpec(f"{P}.{question}[0]", const(False)))
        fields.append(FieldSpec(f"{P}.{question}[1]", const(True)))

    fields.append(FieldSpec(f"{P}.c1_6[0]", const(True)))
    fields.append(FieldSpec(f"{P}.c1_6[1]", const(False)))

    for row, (entered, departed) in enumerate(LINE_G_ROWS):
        fields.append(FieldSpec(f"{P}.{entered}", line_g_cell(row, departed=False)))
        fields.append(FieldSpec(f"{P}.{departed}", line_g_cell(row, departed=True)))

    # Line H: days present in the two prior years and the tax year
    fields.extend([
        FieldSpec(f"{P}.f1_23[0]", lambda ctx: str(ctx.days_in(ctx.tax_year - 2))),
        FieldSpec(f"{P}.f1_24[0]", lambda ctx: str(ctx.days_in(ctx.tax_year - 1))),
        FieldSpec(f"{P}.f1_25[0]", lambda ctx: str(ctx.days_in(ctx.tax_year)), required=True),
        FieldSpec(f"{P}.f1_26[0]", prior_filing),
    ])
    return fields


form_1040nr_schedule_o_mapper = FormMapper(
    form_type=FormType.FORM_1040NR_SCHEDULE_O,
    title="Form 1040-NR (Schedule OI)",
    fields=_fields(),
)
