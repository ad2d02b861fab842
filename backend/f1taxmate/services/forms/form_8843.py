"""
Form 8843 - Statement for Exempt Individuals

Filed by every F-1 student to exclude days of presence from the substantial
presence test, with or without U.S. income.

Hardcoded answers (typical F-1 student, not computed):
  - Line 8 (teachers/trainees): No
  - Line 12 and 13 (students): No
Computed: identity, addresses, visa, days of presence, Part III year marks.
"""

from f1taxmate.models.forms import FormType
from f1taxmate.services.forms.base import FieldSpec, FilingContext, FormMapper, const
from f1taxmate.services.forms.formatting import format_date, format_ssn, join_present

P = "topmostSubform[0].Page1[0]"


def foreign_address_block(ctx: FilingContext) -> str:
    """Country-of-residence address, one line per part, upper case"""
    address = ctx.personal.foreign_address
    country = address.country.upper()
    last_line = f"{country} {address.postal_code}" if address.postal_code else country
    lines = [address.address_line1, address.address_line2, address.city, address.state_province, last_line]
    return "\n".join(line.upper() for line in lines if line)


def us_address_block(ctx: FilingContext) -> str:
    address = ctx.personal.us_address
    if address.city:
        last_line = f"{address.city}, {address.state} {address.zip_code}"
    else:
        last_line = f"{address.state} {address.zip_code}"
    lines = [address.address, address.address_line2, last_line.strip()]
    return "\n".join(line.upper() for line in lines if line)


def visa_and_first_entry(ctx: FilingContext) -> str:
    first_entry = format_date(ctx.residency.date_of_first_visit)
    visa = ctx.personal.visa_type
    return f"{visa} {first_entry}" if first_entry else visa


def university_line(ctx: FilingContext) -> str:
    info = ctx.university
    address = info.university_address
    return join_present([
        info.university_name,
        address.address,
        address.address_line2,
        address.city,
        address.state,
        address.zip_code,
        info.university_contact_number,
    ])


def advisor_line(ctx: FilingContext) -> str:
    info = ctx.university
    address = info.iss_advisor_address
    return join_present([
        info.iss_advisor_name,
        address.address,
        address.address_line2,
        address.city,
        address.state,
        address.zip_code,
        info.iss_advisor_contact_number,
    ])


def days_offset(years_back: int):
    return lambda ctx: str(ctx.days_in(ctx.tax_year - years_back))


def student_year_mark(years_back: int):
    """Line 11: "F" for each prior year the filer was present"""
    def extract(ctx: FilingContext):
        return "F" if ctx.days_in(ctx.tax_year - years_back) > 0 else None
    return extract


def _fields():
    fields = [
        FieldSpec(f"{P}.f1_04[0]", lambda ctx: ctx.personal.first_name),
        FieldSpec(f"{P}.f1_05[0]", lambda ctx: ctx.personal.last_name),
        FieldSpec(f"{P}.f1_06[0]", lambda ctx: format_ssn(ctx.income.ssn)),
        FieldSpec(f"{P}.f1_07[0]", foreign_address_block),
        FieldSpec(f"{P}.f1_08[0]", us_address_block),
        FieldSpec(f"{P}.f1_09[0]", visa_and_first_entry),
        FieldSpec(f"{P}.f1_10[0]", lambda ctx: ctx.personal.visa_type),
        # Country of citizenship and passport issuing country
        FieldSpec(f"{P}.f1_11[0]", lambda ctx: ctx.personal.foreign_address.country),
        FieldSpec(f"{P}.f1_12[0]", lambda ctx: ctx.personal.foreign_address.country),
        FieldSpec(f"{P}.f1_13[0]", lambda ctx: ctx.personal.passport_number),
        # Line 4a: current year, two prior years; Line 4b repeats the current year
        FieldSpec(f"{P}.f1_14[0]", days_offset(0), required=True),
        FieldSpec(f"{P}.f1_15[0]", days_offset(1)),
        FieldSpec(f"{P}.f1_16[0]", days_offset(2)),
        FieldSpec(f"{P}.f1_17[0]", days_offset(0)),
        FieldSpec(f"{P}.f1_26[0]", university_line),
        FieldSpec(f"{P}.f1_27[0]", advisor_line),
    ]

    # Line 11 boxes run oldest to newest: tax year - 6 .. tax year - 1
    year_fields = ["f1_28", "f1_29", "f1_30", "f1_31", "f1_32", "f1_33"]
    for index, name in enumerate(year_fields):
        fields.append(FieldSpec(f"{P}.{name}[0]", student_year_mark(6 - index)))

    for question in ("c1_1", "c1_2", "c1_3"):
        fields.append(FieldSpec(f"{P}.{question}[0]", const(False)))
        fields.append(FieldSpec(f"{P}.{question}[1]", const(True)))

    return fields


form_8843_mapper = FormMapper(
    form_type=FormType.FORM_8843,
    title="Form 8843",
    fields=_fields(),
)
