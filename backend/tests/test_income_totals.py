"""Tests for the shared income totals."""

from decimal import Decimal

from f1taxmate.models.filing import Form1099INT, Form1099MISC, IncomeInfo, W2Form
from f1taxmate.services import income_totals


def mixed_income():
    return IncomeInfo(
        had_us_income=True,
        w2_forms=[
            W2Form(wages=Decimal("12000.50"), federal_tax_withheld=Decimal("900.25"),
                   state_tax_withheld=Decimal("300.99"), social_security_withheld=Decimal("744.03"),
                   medicare_withheld=Decimal("174.01")),
            W2Form(wages=Decimal("3000"), state_tax_withheld=Decimal("75.50")),
        ],
        form_1099_int=[Form1099INT(interest_income=Decimal("120.25"), state_tax_withheld=Decimal("5.99"))],
        form_1099_misc=[Form1099MISC(other_income=Decimal("600"), federal_tax_withheld=Decimal("60"))],
    )


class TestIncomeTotals:
    """Quantities shared by several documents."""

    def test_gross_income_is_unrounded(self):
        assert income_totals.gross_income(mixed_income()) == Decimal("15720.75")

    def test_federal_withheld(self):
        assert income_totals.federal_withheld(mixed_income()) == Decimal("960.25")

    def test_illinois_entries_are_floored_individually(self):
        income = mixed_income()
        assert income_totals.illinois_withholding_entries(income) == [300, 75, 5, 0]
        assert income_totals.illinois_withheld(income) == 380

    def test_illinois_total_differs_from_floored_sum(self):
        income = IncomeInfo(w2_forms=[
            W2Form(state_tax_withheld=Decimal("0.60")),
            W2Form(state_tax_withheld=Decimal("0.60")),
        ])
        assert income_totals.illinois_withheld(income) == 0

    def test_fica_forms_keep_input_order(self):
        income = mixed_income()
        assert income_totals.fica_w2_forms(income) == [income.w2_forms[0]]
        assert income_totals.has_fica_withheld(income)

    def test_fica_totals(self):
        totals = income_totals.fica_totals(mixed_income())
        assert totals.social_security == 744
        assert totals.medicare == 174
        assert totals.total == 918

    def test_no_fica(self):
        income = IncomeInfo(w2_forms=[W2Form(wages=Decimal("100"))])
        assert not income_totals.has_fica_withheld(income)
        assert income_totals.fica_totals(income).total == 0
