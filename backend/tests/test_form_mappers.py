"""Tests for the per-document field mappers."""

from datetime import date
from decimal import Decimal

import pytest

from f1taxmate.models.filing import BankDetails, Form1099INT, Form1099MISC, Visit, W2Form
from f1taxmate.models.forms import FieldKind, FormType, RadioChoice, kind_of
from f1taxmate.services.forms.base import TemplateNamespace
from f1taxmate.services.forms.form_1040nr import P1 as NR_P1, P2 as NR_P2, form_1040nr_mapper
from f1taxmate.services.forms.form_1040nr_schedule_o import LINE_G_ROWS, P as SCHEDULE_O_P, form_1040nr_schedule_o_mapper
from f1taxmate.services.forms.form_843 import P1 as F843_P1, P2 as F843_P2, form_843_mapper
from f1taxmate.services.forms.form_8316 import form_8316_mapper
from f1taxmate.services.forms.form_8843 import P as F8843_P, form_8843_mapper
from f1taxmate.services.forms.il_1040 import COUNTY_ALTERNATES, il_1040_mapper
from f1taxmate.services.forms.il_schedule_nr import il_schedule_nr_mapper
from f1taxmate.services.forms.il_schedule_wit import MAX_ROWS, il_schedule_wit_mapper, withholding_rows
from f1taxmate.services.forms.registry import MAPPERS, get_mapper


def namespace_for(values, drop=()):
    return TemplateNamespace({
        name: kind_of(value) for name, value in values.items() if name not in drop
    })


class TestFormMapper:
    """Resolution against a template namespace."""

    def test_every_document_has_a_mapper(self):
        assert set(MAPPERS) == set(FormType)
        assert get_mapper(FormType.FORM_8843) is form_8843_mapper

    @pytest.mark.parametrize("form_type", list(FormType))
    def test_complete_template_fills_every_value(self, form_type, context_factory, illinois_filing):
        context = context_factory(illinois_filing)
        mapper = get_mapper(form_type)
        values = mapper.map_values(context)

        report = mapper.fill(namespace_for(values), context)

        assert report.values == values
        assert report.complete
        assert report.missing_optional == []

    def test_missing_cosmetic_field_is_a_warning(self, context_factory, illinois_filing):
        context = context_factory(illinois_filing)
        values = form_1040nr_mapper.map_values(context)
        email_field = f"{NR_P2}.f2_50[0]"

        report = form_1040nr_mapper.fill(namespace_for(values, drop={email_field}), context)

        assert report.missing_optional == [email_field]
        assert report.complete
        assert email_field not in report.values

    def test_missing_required_field_is_flagged(self, context_factory, illinois_filing):
        context = context_factory(illinois_filing)
        values = il_schedule_wit_mapper.map_values(context)

        report = il_schedule_wit_mapper.fill(namespace_for(values, drop={"Total amount"}), context)

        assert report.missing_required == ["Total amount"]
        assert not report.complete

    def test_alternate_field_name_is_used(self, context_factory, illinois_filing):
        context = context_factory(illinois_filing)
        values = il_1040_mapper.map_values(context)
        namespace = namespace_for(values, drop={"step1-A-county"})
        fields = {name: namespace.kind(name) for name in namespace.names}
        fields[COUNTY_ALTERNATES[0]] = FieldKind.TEXT

        report = il_1040_mapper.fill(TemplateNamespace(fields), context)

        assert report.values[COUNTY_ALTERNATES[0]] == "Cook"
        assert "step1-A-county" not in report.missing_optional

    def test_kind_mismatch_is_not_written(self, context_factory, illinois_filing):
        context = context_factory(illinois_filing)
        values = il_1040_mapper.map_values(context)
        fields = {name: kind_of(value) for name, value in values.items()}
        fields["filing_status"] = FieldKind.TEXT

        report = il_1040_mapper.fill(TemplateNamespace(fields), context)

        assert report.kind_mismatches == ["filing_status"]
        assert "filing_status" not in report.values


class TestFederalMappers:
    """Form 1040-NR, Schedule OI and Form 8843."""

    def test_1040nr_lines_match_tax_result(self, context_factory, form_data_factory, scenario_one_w2):
        values = form_1040nr_mapper.map_values(context_factory(form_data_factory(w2_forms=[scenario_one_w2])))

        assert values[f"{NR_P1}.f1_42[0]"] == "30000"
        assert values[f"{NR_P1}.f1_16[0]"] == "123456789"
        assert values[f"{NR_P2}.f2_02[0]"] == "15750"
        assert values[f"{NR_P2}.f2_07[0]"] == "14250"
        assert values[f"{NR_P2}.f2_09[0]"] == "1471"
        assert values[f"{NR_P2}.Line25_ReadOrder[0].f2_21[0]"] == "2000"
        assert values[f"{NR_P2}.f2_37[0]"] == "529"
        assert values[f"{NR_P2}.f2_47[0]"] == "Student"

    def test_1040nr_direct_deposit_only_when_given(self, context_factory, illinois_filing, form_data_factory):
        with_bank = form_1040nr_mapper.map_values(context_factory(illinois_filing))
        without_bank = form_1040nr_mapper.map_values(context_factory(form_data_factory(w2_forms=[])))

        assert with_bank[f"{NR_P2}.RoutingNo[0].f2_38[0]"] == "071000013"
        assert f"{NR_P2}.RoutingNo[0].f2_38[0]" not in without_bank

    def test_schedule_o_line_g_and_days(self, context_factory, form_data_factory):
        visits = [
            Visit(visa_type="F1", entry_date=date(2024, 8, 10), exit_date=date(2025, 5, 15)),
            Visit(visa_type="F1", entry_date=date(2025, 8, 20), exit_date=None),
        ]
        values = form_1040nr_schedule_o_mapper.map_values(context_factory(form_data_factory(visits=visits)))

        first_entered, first_departed = LINE_G_ROWS[0]
        second_entered, second_departed = LINE_G_ROWS[1]
        assert values[f"{SCHEDULE_O_P}.{first_entered}"] == "01/01/25"
        assert values[f"{SCHEDULE_O_P}.{first_departed}"] == "05/15/25"
        assert values[f"{SCHEDULE_O_P}.{second_entered}"] == "08/20/25"
        assert values[f"{SCHEDULE_O_P}.{second_departed}"] == ""
        assert f"{SCHEDULE_O_P}.{LINE_G_ROWS[2][0]}" not in values
        assert values[f"{SCHEDULE_O_P}.f1_25[0]"] == "268"

    def test_8843_days_and_answers(self, context_factory, illinois_filing):
        values = form_8843_mapper.map_values(context_factory(illinois_filing))

        assert values[f"{F8843_P}.f1_14[0]"] == "365"
        assert values[f"{F8843_P}.f1_15[0]"] == "366"
        assert values[f"{F8843_P}.f1_16[0]"] == "144"
        assert values[f"{F8843_P}.f1_06[0]"] == "123-45-6789"
        assert values[f"{F8843_P}.c1_1[0]"] is False
        assert values[f"{F8843_P}.c1_1[1]"] is True

    def test_8843_without_income(self, context_factory, no_income_filing):
        values = form_8843_mapper.map_values(context_factory(no_income_filing))
        assert values[f"{F8843_P}.f1_06[0]"] == ""
        assert values[f"{F8843_P}.f1_11[0]"] == "Brazil"


class TestFICAMappers:
    """Form 843 and Form 8316."""

    def test_8316_references_only_fica_employers(self, context_factory, fica_filing):
        statement = form_8316_mapper.map_values(context_factory(fica_filing))["FillText7"]

        assert statement.index("Campus Dining LLC") < statement.index("Lab Research Corp")
        assert "EIN: 36-1234567" in statement
        assert "EIN: 36-3333333" in statement
        assert "36-2222222" not in statement
        assert statement.count("EIN:") == 2

    def test_8316_without_employer_details(self, context_factory, fica_filing):
        form_data = fica_filing.model_copy(update={
            "income_info": fica_filing.income_info.model_copy(update={"fica_employer_info": None})
        })
        statement = form_8316_mapper.map_values(context_factory(form_data))["FillText7"]

        assert statement.startswith("See attached W-2 for employer name and address. EIN: 36-1234567")
        assert statement.count("See attached W-2") == 2

    def test_8316_hardcoded_answers(self, context_factory, fica_filing):
        values = form_8316_mapper.map_values(context_factory(fica_filing))

        assert values["A"] == RadioChoice(option="1")
        assert values["5"] == RadioChoice(option="3")
        assert values["FillText12"] == "(312) 555-0142"

    def test_843_claims_fica_total(self, context_factory, fica_filing):
        values = form_843_mapper.map_values(context_factory(fica_filing))
        explanation = values[f"{F843_P2}.ExplainWhy[0].f2_3[0]"]

        assert values[f"{F843_P1}.f1_19[0]"] == "1850"
        assert values[f"{F843_P1}.c1_1[4]"] is True
        assert values[f"{F843_P1}.c1_1[3]"] is False
        assert "Total refund requested: $1850." in explanation
        assert "(EIN: 36-1234567)" in explanation
        assert len(explanation.splitlines()) == 7


class TestIllinoisMappers:
    """IL-1040 and its schedules agree with each other."""

    @pytest.fixture
    def fractional_filing(self, form_data_factory):
        return form_data_factory(
            w2_forms=[
                W2Form(wages=Decimal("18000"), state_tax_withheld=Decimal("100.75"), ein="36-1234567"),
                W2Form(wages=Decimal("2000"), state_tax_withheld=Decimal("40.90"), ein="36-7654321"),
            ],
            form_1099_int=[
                Form1099INT(interest_income=Decimal("250"), state_tax_withheld=Decimal("20.60"), payer_tin="98-7654321"),
                Form1099INT(interest_income=Decimal("40")),
            ],
        )

    def test_withholding_identity_across_documents(self, context_factory, fractional_filing):
        context = context_factory(fractional_filing)
        il_1040 = il_1040_mapper.map_values(context)
        schedule = il_schedule_wit_mapper.map_values(context)

        assert schedule["Total amount"] == "160"
        assert il_1040["Illinois Income Tax withheld"] == schedule["Total amount"]
        assert context.tax_result.state_tax.breakdown.withheld == 160

    def test_withholding_rows(self, context_factory, fractional_filing):
        rows = withholding_rows(context_factory(fractional_filing))

        assert [row.code for row in rows] == ["W", "W", "I"]
        assert [row.illinois_withheld for row in rows] == [100, 40, 20]
        assert rows[2].ein == "987654321"

    def test_rows_beyond_template_are_dropped(self, context_factory, form_data_factory):
        form_data = form_data_factory(
            w2_forms=[W2Form(wages=Decimal("1000"), state_tax_withheld=Decimal("10")) for _ in range(4)],
            form_1099_int=[Form1099INT(interest_income=Decimal("50"), state_tax_withheld=Decimal("2"))],
        )
        form_data = form_data.model_copy(update={
            "income_info": form_data.income_info.model_copy(update={
                "form_1099_misc": [Form1099MISC(other_income=Decimal("80"), state_tax_withheld=Decimal("3"))]
            })
        })
        values = il_schedule_wit_mapper.map_values(context_factory(form_data))

        assert f"Form type - {MAX_ROWS}" in values
        assert f"Form type - {MAX_ROWS + 1}" not in values
        assert values["Total amount"] == "45"

    def test_il_1040_refund_with_direct_deposit(self, context_factory, illinois_filing):
        values = il_1040_mapper.map_values(context_factory(illinois_filing))

        assert values["Federally adjusted income"] == "30000"
        assert values["Exemption allowance"] == "2850"
        assert values["Total Tax"] == "1343"
        assert values["Refunded to you"] == "157"
        assert values["Amount you owe"] == "0"
        assert values["Routing number"] == "071000013"
        assert values["account_type"] is True
        assert values["date_2"] == "03/02/2026"
        assert values["DaytimeAreaCode_1"] == "312"

    def test_il_1040_balance_due_has_no_deposit(self, context_factory, form_data_factory, scenario_one_w2):
        form_data = form_data_factory(
            w2_forms=[scenario_one_w2],
            bank_details=BankDetails(account_number="1", routing_number="071000013"),
        )
        values = il_1040_mapper.map_values(context_factory(form_data))

        assert values["Amount you owe"] == "343"
        assert "Routing number" not in values
        assert "account_type" not in values

    def test_schedule_nr_matches_il_1040(self, context_factory, illinois_filing):
        context = context_factory(illinois_filing)
        schedule = il_schedule_nr_mapper.map_values(context)
        il_1040 = il_1040_mapper.map_values(context)

        required = [spec.name for spec in il_schedule_nr_mapper.fields if spec.required]
        assert [schedule[name] for name in required] == ["27150", "27150", "1343"]
        assert il_1040["Illinois net income from Schedule NR"] == "27150"
