"""Tests for reading, filling and merging fillable PDFs."""

import io

import pytest
from PyPDF2 import PdfReader

from f1taxmate.models.forms import FieldKind, RadioChoice
from f1taxmate.services.pdf_filler import fill_pdf, merge_pdfs, page_count, read_field_namespace

FIELDS = [
    ("topmostSubform[0].Page1[0].f1_04[0]", FieldKind.TEXT, ()),
    ("topmostSubform[0].Page1[0].c1_1[0]", FieldKind.CHECKBOX, ()),
    ("topmostSubform[0].Page1[0].c1_1[1]", FieldKind.CHECKBOX, ()),
    ("A", FieldKind.RADIO, ("1", "2")),
]


@pytest.fixture
def template(fillable_pdf_factory):
    return fillable_pdf_factory(FIELDS)


def read_fields(pdf_bytes):
    return PdfReader(io.BytesIO(pdf_bytes)).get_fields()


class TestFieldNamespace:
    """Field discovery."""

    def test_names_and_kinds(self, template):
        namespace = read_field_namespace(template)

        assert len(namespace) == 4
        for name, kind, _options in FIELDS:
            assert namespace.kind(name) == kind

    def test_resolve_prefers_first_candidate(self, template):
        namespace = read_field_namespace(template)
        assert namespace.resolve(["missing", "A", "topmostSubform[0].Page1[0].f1_04[0]"]) == "A"
        assert namespace.resolve(["missing"]) is None


class TestFillPdf:
    """Writing values."""

    def test_values_are_written(self, template):
        filled = fill_pdf(template, {
            "topmostSubform[0].Page1[0].f1_04[0]": "Asha",
            "topmostSubform[0].Page1[0].c1_1[0]": False,
            "topmostSubform[0].Page1[0].c1_1[1]": True,
            "A": RadioChoice(option="2"),
        })
        fields = read_fields(filled)

        assert fields["topmostSubform[0].Page1[0].f1_04[0]"]["/V"] == "Asha"
        assert fields["topmostSubform[0].Page1[0].c1_1[0]"]["/V"] == "/Off"
        assert fields["topmostSubform[0].Page1[0].c1_1[1]"]["/V"] != "/Off"
        assert fields["A"]["/V"] == "/2"

    def test_template_is_untouched(self, template):
        original = bytes(template)
        fill_pdf(template, {"topmostSubform[0].Page1[0].f1_04[0]": "Asha"})
        assert template == original

    def test_unknown_values_are_ignored(self, template):
        filled = fill_pdf(template, {"not-a-field": "x"})
        assert page_count(filled) == page_count(template)

    def test_need_appearances_is_set(self, template):
        reader = PdfReader(io.BytesIO(fill_pdf(template, {})))
        assert reader.trailer["/Root"]["/AcroForm"]["/NeedAppearances"].value is True

    def test_filled_document_keeps_pages_and_form(self, fillable_pdf_factory):
        template = fillable_pdf_factory([(f"f{i}", FieldKind.TEXT, ()) for i in range(45)])

        filled = fill_pdf(template, {"f0": "Asha", "f44": "Rao"})
        reader = PdfReader(io.BytesIO(filled))
        fields = reader.get_fields()

        assert len(reader.pages) == page_count(template) == 2
        assert len(reader.trailer["/Root"]["/AcroForm"]["/Fields"]) == 45
        assert fields["f0"]["/V"] == "Asha"
        assert fields["f44"]["/V"] == "Rao"
        assert read_field_namespace(filled).kind("f44") == FieldKind.TEXT

    def test_default_appearance_is_kept(self, template):
        source = PdfReader(io.BytesIO(template)).trailer["/Root"]["/AcroForm"]
        acro_form = PdfReader(io.BytesIO(fill_pdf(template, {}))).trailer["/Root"]["/AcroForm"]

        assert acro_form["/DA"] == source["/DA"]
        assert set(acro_form["/DR"]["/Font"]) == set(source["/DR"]["/Font"])


class TestMergePdfs:
    """Package concatenation."""

    def test_page_counts_add_up(self, fillable_pdf_factory):
        single = fillable_pdf_factory(FIELDS)
        two_pages = fillable_pdf_factory([(f"f{i}", FieldKind.TEXT, ()) for i in range(45)])

        merged = merge_pdfs([single, two_pages, single])

        assert page_count(two_pages) == 2
        assert page_count(merged) == page_count(single) * 2 + 2

    def test_same_named_fields_stay_independent(self, template):
        first = fill_pdf(template, {"topmostSubform[0].Page1[0].f1_04[0]": "Asha"})
        second = fill_pdf(template, {"topmostSubform[0].Page1[0].f1_04[0]": "Rao"})

        fields = read_fields(merge_pdfs([first, second]))

        assert fields["part1_topmostSubform[0].Page1[0].f1_04[0]"]["/V"] == "Asha"
        assert fields["part2_topmostSubform[0].Page1[0].f1_04[0]"]["/V"] == "Rao"
        assert "part2_A" in fields

    def test_fonts_of_every_part_are_kept(self, template):
        merged = merge_pdfs([fill_pdf(template, {}), fill_pdf(template, {})])
        acro_form = PdfReader(io.BytesIO(merged)).trailer["/Root"]["/AcroForm"]

        assert acro_form["/DA"]
        assert len(acro_form["/DR"]["/Font"]) > 0
        assert acro_form["/NeedAppearances"].value is True
