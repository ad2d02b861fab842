"""Tests for the HTTP API."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from conftest import InMemoryTemplateStore, build_templates, context_for
from f1taxmate.api.v1.endpoints.forms import get_package_assembler
from f1taxmate.main import app
from f1taxmate.models.filing import W2Form
from f1taxmate.models.forms import FormType
from f1taxmate.services.package_assembler import PackageAssembler
from f1taxmate.services.template_store import get_template_store


def payload(form_data):
    return form_data.model_dump(mode="json", by_alias=True)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def use_templates_for():
    """Serve fixture templates matching the given filing"""
    def install(form_data, skip=()):
        store = InMemoryTemplateStore(build_templates(context_for(form_data), skip))
        app.dependency_overrides[get_package_assembler] = lambda: PackageAssembler(template_store=store)
        return store
    return install


@pytest.fixture
def underpayment_filing(form_data_factory):
    return form_data_factory(w2_forms=[
        W2Form(wages=Decimal("30000"), federal_tax_withheld=Decimal("1671"),
               state_tax_withheld=Decimal("843"), ein="36-1234567"),
    ])


class TestTaxCompute:
    """POST /api/v1/tax-compute"""

    def test_compute(self, client, illinois_filing):
        response = client.post("/api/v1/tax-compute", json=payload(illinois_filing))

        assert response.status_code == 200
        body = response.json()
        assert body["tax_result"]["federal_tax"]["refund"] == 529
        assert body["tax_result"]["state_tax"]["refund"] == 157
        assert body["refund_by_product"] == {"federal": 529, "illinois": 157}
        assert [product["id"] for product in body["products"]] == ["federal", "illinois"]
        assert body["has_net_underpayment"] is False

    def test_accepts_snake_case(self, client, illinois_filing):
        response = client.post("/api/v1/tax-compute", json=illinois_filing.model_dump(mode="json"))
        assert response.status_code == 200

    def test_underpayment_is_reported(self, client, underpayment_filing):
        body = client.post("/api/v1/tax-compute", json=payload(underpayment_filing)).json()
        assert body["has_net_underpayment"] is True
        assert body["refund_by_product"] == {"federal": 200}

    def test_no_income(self, client, no_income_filing):
        body = client.post("/api/v1/tax-compute", json=payload(no_income_filing)).json()
        assert body["tax_result"]["federal_tax"]["tax_owed"] == 0
        assert [product["id"] for product in body["products"]] == ["form8843"]

    def test_invalid_filing(self, client, form_data_factory, scenario_one_w2):
        form_data = form_data_factory(w2_forms=[scenario_one_w2], ssn="1234")

        response = client.post("/api/v1/tax-compute", json=payload(form_data))

        assert response.status_code == 422
        assert response.json()["detail"]["errors"] == ["SSN must be 9 digits"]

    def test_blank_ein_is_rejected(self, client, form_data_factory, scenario_one_w2):
        form_data = form_data_factory(w2_forms=[scenario_one_w2.model_copy(update={"ein": ""})])

        response = client.post("/api/v1/tax-compute", json=payload(form_data))

        assert response.status_code == 422
        assert response.json()["detail"]["errors"] == ["W-2 #1: EIN is required"]

    def test_unsupported_country(self, client, form_data_factory, scenario_one_w2):
        form_data = form_data_factory(w2_forms=[scenario_one_w2], country="Brazil")

        response = client.post("/api/v1/tax-compute", json=payload(form_data))

        assert response.status_code == 400
        assert response.json()["detail"]["kind"] == "country"

    def test_malformed_body(self, client):
        response = client.post("/api/v1/tax-compute", json={"incomeInfo": {"w2Forms": [{"wages": -5}]}})
        assert response.status_code == 422

    def test_products(self, client, fica_filing):
        response = client.post("/api/v1/tax-compute/products", json=payload(fica_filing))

        assert response.status_code == 200
        assert [product["id"] for product in response.json()["products"]] == ["federal", "illinois", "fica"]


class TestFormPackages:
    """POST /api/v1/forms/{product_id}"""

    def test_federal_package(self, client, illinois_filing, use_templates_for):
        use_templates_for(illinois_filing)

        response = client.post("/api/v1/forms/federal", json=payload(illinois_filing))

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == 'attachment; filename="Federal_Tax_Return_2025.pdf"'
        assert int(response.headers["x-page-count"]) > 5
        assert response.content.startswith(b"%PDF")

    def test_fica_package(self, client, fica_filing, use_templates_for):
        use_templates_for(fica_filing)

        response = client.post("/api/v1/forms/fica", json=payload(fica_filing))

        assert response.status_code == 200
        assert 'filename="FICA_Refund_2025.pdf"' in response.headers["content-disposition"]

    def test_net_underpayment_conflict(self, client, underpayment_filing, use_templates_for):
        store = use_templates_for(underpayment_filing)

        response = client.post("/api/v1/forms/federal", json=payload(underpayment_filing))

        assert response.status_code == 409
        assert response.json()["detail"]["total_owed"] == 500
        assert store.requested == []

    def test_product_not_offered(self, client, no_income_filing, use_templates_for):
        use_templates_for(no_income_filing)
        response = client.post("/api/v1/forms/federal", json=payload(no_income_filing))
        assert response.status_code == 400

    def test_unknown_product(self, client, illinois_filing):
        response = client.post("/api/v1/forms/california", json=payload(illinois_filing))
        assert response.status_code == 422

    def test_fica_requires_employer_info(self, client, fica_filing, use_templates_for):
        use_templates_for(fica_filing)
        income_info = fica_filing.income_info.model_copy(update={"fica_employer_info": None})
        form_data = fica_filing.model_copy(update={"income_info": income_info})

        response = client.post("/api/v1/forms/fica", json=payload(form_data))

        assert response.status_code == 422
        assert len(response.json()["detail"]["errors"]) == 2

    def test_missing_required_template(self, client, illinois_filing, use_templates_for):
        use_templates_for(illinois_filing, skip=[FormType.FORM_IL1040])

        response = client.post("/api/v1/forms/illinois", json=payload(illinois_filing))

        assert response.status_code == 500
        assert response.json()["detail"]["document"] == "IL-1040"


class TestMonitoring:
    """Health and metrics."""

    def test_health(self, client):
        body = client.get("/api/v1/health").json()
        assert body["status"] == "ok"
        assert body["tax_year"] == 2025

    def test_detailed_health(self, client, no_income_filing):
        store = InMemoryTemplateStore(build_templates(context_for(no_income_filing)))
        app.dependency_overrides[get_template_store] = lambda: store

        body = client.get("/api/v1/health/detailed").json()

        assert body["status"] == "ok"
        assert body["dependencies"]["template_store"]["status"] == "ok"

    def test_detailed_health_without_templates(self, client):
        app.dependency_overrides[get_template_store] = lambda: InMemoryTemplateStore({})

        body = client.get("/api/v1/health/detailed").json()

        assert body["status"] == "degraded"
        assert body["dependencies"]["template_store"]["status"] == "error"

    def test_metrics(self, client, illinois_filing):
        client.post("/api/v1/tax-compute", json=payload(illinois_filing))

        counters = client.get("/api/v1/metrics").json()["counters"]

        assert counters["api_requests"] == 1
        assert counters["tax_computations"] == 1
