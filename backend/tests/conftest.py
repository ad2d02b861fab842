"""Pytest configuration and fixtures for the test suite."""

import io
from datetime import date
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from f1taxmate.core.exceptions import TemplateNotFoundError
from f1taxmate.models.filing import (
    BankDetails,
    FICAEmployerEntry,
    ForeignAddress,
    Form1099INT,
    FormData,
    IncomeInfo,
    IncomeState,
    PersonalInfo,
    ResidencyInfo,
    UniversityInfo,
    USAddress,
    Visit,
    W2Form,
)
from f1taxmate.models.forms import TEMPLATE_PATHS, FieldKind, FormType, RadioChoice, kind_of
from f1taxmate.models.tax_result import TaxResult
from f1taxmate.monitoring.metrics import metrics_collector
from f1taxmate.services.forms.base import FilingContext
from f1taxmate.services.forms.registry import MAPPERS
from f1taxmate.services.tax_rules_engine import get_tax_rules_engine
from f1taxmate.services.template_store import TemplateStore

PREPARED_ON = date(2026, 3, 2)

# (name, kind, radio options)
FixtureField = Tuple[str, FieldKind, Tuple[str, ...]]


def make_form_data(
    w2_forms: Optional[List[W2Form]] = None,
    form_1099_int: Optional[List[Form1099INT]] = None,
    had_us_income: bool = True,
    income_state: Optional[IncomeState] = IncomeState.ILLINOIS,
    fica_employer_info: Optional[List[FICAEmployerEntry]] = None,
    bank_details: Optional[BankDetails] = None,
    visits: Optional[List[Visit]] = None,
    country: str = "India",
    ssn: Optional[str] = "123456789",
) -> FormData:
    """Questionnaire for a typical Indian F-1 student in Chicago"""
    if visits is None:
        visits = [Visit(visa_type="F1", entry_date=date(2023, 8, 10), exit_date=None)]

    return FormData(
        personal_info=PersonalInfo(
            first_name="Asha",
            last_name="Rao",
            date_of_birth=date(2000, 5, 14),
            phone="(312) 555-0142",
            email="asha.rao@example.edu",
            passport_number="Z1234567",
            visa_type="F1",
            us_address=USAddress(
                address="1200 W Harrison St",
                address_line2="Apt 4B",
                city="Chicago",
                state="IL",
                county="Cook",
                zip_code="60607",
            ),
            foreign_address=ForeignAddress(
                address_line1="14 MG Road",
                city="Bengaluru",
                state_province="Karnataka",
                postal_code="560001",
                country=country,
            ),
        ),
        university_info=UniversityInfo(
            university_name="University of Illinois Chicago",
            university_contact_number="312-996-3121",
            iss_advisor_name="Office of International Services",
        ),
        residency_info=ResidencyInfo(
            date_of_first_visit=date(2023, 8, 10),
            visits=visits,
        ),
        income_info=IncomeInfo(
            had_us_income=had_us_income,
            income_state=income_state if had_us_income else None,
            ssn=ssn if had_us_income else None,
            w2_forms=w2_forms if w2_forms is not None else [],
            form_1099_int=form_1099_int or [],
            fica_employer_info=fica_employer_info,
            bank_details=bank_details,
        ),
    )


def build_fillable_pdf(fields: Iterable[FixtureField], per_page: int = 40) -> bytes:
    """Fillable PDF exposing exactly the given fields"""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    form = pdf.acroForm

    for index, (name, kind, options) in enumerate(fields):
        if index and index % per_page == 0:
            pdf.showPage()
        slot = index % per_page
        x = 40 + (slot % 4) * 140
        y = 720 - (slot // 4) * 60

        if kind == FieldKind.TEXT:
            form.textfield(name=name, x=x, y=y, width=120, height=18)
        elif kind == FieldKind.CHECKBOX:
            form.checkbox(name=name, x=x, y=y, size=14)
        else:
            for offset, option in enumerate(options):
                form.radio(name=name, value=option, selected=False, x=x + offset * 20, y=y, size=14)

    pdf.drawString(40, 40, "fixture template")
    pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def template_fields(form_type: FormType, context: FilingContext) -> List[FixtureField]:
    """Fixture fields matching what the mapper writes for this filing"""
    fields = []
    for spec in MAPPERS[form_type].fields:
        value = spec.extract(context)
        if value is None:
            fields.append((spec.name, FieldKind.TEXT, ()))
            continue
        kind = kind_of(value)
        options: Tuple[str, ...] = ()
        if isinstance(value, RadioChoice):
            options = (value.option, "9" if value.option != "9" else "8")
        fields.append((spec.name, kind, options))
    return fields


def build_templates(context: FilingContext, skip: Iterable[FormType] = ()) -> Dict[str, bytes]:
    skipped = set(skip)
    return {
        TEMPLATE_PATHS[form_type]: build_fillable_pdf(template_fields(form_type, context))
        for form_type in MAPPERS
        if form_type not in skipped
    }


class InMemoryTemplateStore(TemplateStore):
    """Template store backed by a dict of path -> bytes"""

    def __init__(self, templates: Dict[str, bytes], timeout_seconds: float = 5.0):
        super().__init__(timeout_seconds)
        self.templates = templates
        self.requested: List[str] = []

    def _read(self, relative_path: str) -> bytes:
        self.requested.append(relative_path)
        if relative_path not in self.templates:
            raise TemplateNotFoundError(f"Template {relative_path} not found", template=relative_path)
        return self.templates[relative_path]


@pytest.fixture(autouse=True)
def reset_metrics():
    metrics_collector.reset()
    yield
    metrics_collector.reset()


@pytest.fixture
def form_data_factory():
    return make_form_data


@pytest.fixture
def scenario_one_w2():
    return W2Form(
        wages=Decimal("30000"),
        federal_tax_withheld=Decimal("2000"),
        state_tax_withheld=Decimal("1000"),
        ein="36-1234567",
    )


@pytest.fixture
def illinois_filing(scenario_one_w2) -> FormData:
    """Illinois W-2 filer who owes the state but gets a larger federal refund"""
    return make_form_data(
        w2_forms=[scenario_one_w2.model_copy(update={"state_tax_withheld": Decimal("1500")})],
        bank_details=BankDetails(account_number="000123456789", routing_number="071000013"),
    )


@pytest.fixture
def fica_filing() -> FormData:
    """Two W-2s with FICA withheld around one without"""
    return make_form_data(
        w2_forms=[
            W2Form(wages=Decimal("8000"), federal_tax_withheld=Decimal("600"),
                   social_security_withheld=Decimal("496"), medicare_withheld=Decimal("116"),
                   ein="361234567"),
            W2Form(wages=Decimal("4000"), federal_tax_withheld=Decimal("300"), ein="362222222"),
            W2Form(wages=Decimal("20000"), federal_tax_withheld=Decimal("1500"),
                   social_security_withheld=Decimal("1000"), medicare_withheld=Decimal("238"),
                   ein="363333333"),
        ],
        fica_employer_info=[
            FICAEmployerEntry(employer_name="Campus Dining LLC", employer_address="750 S Halsted St, Chicago, IL"),
            FICAEmployerEntry(employer_name="Lab Research Corp", employer_address="1 N State St, Chicago, IL"),
        ],
    )


@pytest.fixture
def no_income_filing() -> FormData:
    return make_form_data(had_us_income=False, w2_forms=[], income_state=None, country="Brazil")


def compute(form_data: FormData) -> TaxResult:
    return get_tax_rules_engine(2025).compute_tax(form_data)


def context_for(form_data: FormData) -> FilingContext:
    return FilingContext(form_data=form_data, tax_result=compute(form_data), prepared_on=PREPARED_ON)


@pytest.fixture
def context_factory():
    return context_for


@pytest.fixture
def template_store_factory():
    def factory(context: FilingContext, skip: Iterable[FormType] = ()) -> InMemoryTemplateStore:
        return InMemoryTemplateStore(build_templates(context, skip))
    return factory


@pytest.fixture
def fillable_pdf_factory():
    return build_fillable_pdf
