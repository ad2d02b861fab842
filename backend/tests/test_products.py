"""Tests for product applicability and refund summaries."""

from decimal import Decimal

import pytest

from f1taxmate.core.exceptions import NetUnderpaymentError
from f1taxmate.models.filing import IncomeState, W2Form
from f1taxmate.models.forms import ProductId
from f1taxmate.services.products import (
    applicable_products,
    ensure_no_net_underpayment,
    has_net_underpayment,
    refund_by_product,
)
from f1taxmate.services.tax_rules_engine import get_tax_rules_engine


def product_ids(form_data):
    return [option.id for option in applicable_products(form_data)]


class TestApplicableProducts:
    """Which bundles are offered."""

    def test_no_income_gets_8843_only(self, no_income_filing):
        assert product_ids(no_income_filing) == [ProductId.FORM_8843]

    def test_illinois_w2_filer(self, illinois_filing):
        assert product_ids(illinois_filing) == [ProductId.FEDERAL, ProductId.ILLINOIS]

    def test_other_state_has_no_illinois_bundle(self, form_data_factory, scenario_one_w2):
        form_data = form_data_factory(w2_forms=[scenario_one_w2], income_state=IncomeState.OTHER)
        assert product_ids(form_data) == [ProductId.FEDERAL]

    def test_fica_offered_when_withheld(self, fica_filing):
        assert product_ids(fica_filing) == [ProductId.FEDERAL, ProductId.ILLINOIS, ProductId.FICA]

    def test_labels(self, fica_filing):
        options = {option.id: option for option in applicable_products(fica_filing)}
        assert options[ProductId.FICA].label == "FICA only"
        assert "8316" in options[ProductId.FICA].description


class TestRefundByProduct:
    """Money back per bundle."""

    def test_illinois_filing(self, illinois_filing):
        result = get_tax_rules_engine(2025).compute_tax(illinois_filing)
        assert refund_by_product(illinois_filing, result) == {
            ProductId.FEDERAL: 529,
            ProductId.ILLINOIS: 157,
        }

    def test_fica_refund_is_withheld_total(self, fica_filing):
        result = get_tax_rules_engine(2025).compute_tax(fica_filing)
        assert refund_by_product(fica_filing, result)[ProductId.FICA] == 1850

    def test_balance_due_is_not_listed(self, form_data_factory, scenario_one_w2):
        form_data = form_data_factory(w2_forms=[scenario_one_w2])
        result = get_tax_rules_engine(2025).compute_tax(form_data)

        refunds = refund_by_product(form_data, result)

        assert refunds == {ProductId.FEDERAL: 529}


class TestNetUnderpayment:
    """Refusal of payable bundles."""

    @pytest.fixture
    def underpaid(self, form_data_factory):
        form_data = form_data_factory(w2_forms=[
            W2Form(wages=Decimal("30000"), federal_tax_withheld=Decimal("1671"),
                   state_tax_withheld=Decimal("843")),
        ])
        return get_tax_rules_engine(2025).compute_tax(form_data)

    def test_refund_and_balance_due_are_netted(self, underpaid):
        assert underpaid.federal_tax.refund == 200
        assert underpaid.state_tax.amount_owed == 500
        assert has_net_underpayment(underpaid)

    @pytest.mark.parametrize("product_id", [ProductId.FEDERAL, ProductId.ILLINOIS])
    def test_payable_products_refused(self, underpaid, product_id):
        with pytest.raises(NetUnderpaymentError) as exc_info:
            ensure_no_net_underpayment(underpaid, product_id)
        assert exc_info.value.total_owed - exc_info.value.total_refund == 300

    @pytest.mark.parametrize("product_id", [ProductId.FICA, ProductId.FORM_8843])
    def test_other_products_allowed(self, underpaid, product_id):
        ensure_no_net_underpayment(underpaid, product_id)

    def test_scenario_one_is_not_underpaid(self, form_data_factory, scenario_one_w2):
        # 529 federal refund against 343 owed to Illinois
        form_data = form_data_factory(w2_forms=[scenario_one_w2])
        assert not has_net_underpayment(get_tax_rules_engine(2025).compute_tax(form_data))
