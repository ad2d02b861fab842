"""
PDF Filler

Reads the field namespace of a fillable template, writes mapped values into
it and concatenates filled documents into one package. Field names are the
fully qualified AcroForm names: the /T parts joined by "." up the /Parent
chain, e.g. "topmostSubform[0].Page1[0].f1_04[0]".
"""

import io
from typing import Dict, Iterator, List, Mapping, Optional, Sequence, Tuple
from PyPDF2 import PdfReader, PdfWriter
from PyPDF2.generic import (
    ArrayObject,
    BooleanObject,
    DictionaryObject,
    IndirectObject,
    NameObject,
    TextStringObject,
)
import structlog

from f1taxmate.models.forms import FieldKind, FieldValue, RadioChoice
from f1taxmate.services.forms.base import TemplateNamespace

logger = structlog.get_logger()

RADIO_FLAG = 1 << 15
PUSHBUTTON_FLAG = 1 << 16
OFF = NameObject("/Off")


def _inherited(field: DictionaryObject, key: str):
    node = field
    while node is not None:
        if key in node:
            return node[key]
        node = node["/Parent"] if "/Parent" in node else None
    return None


def _qualified_name(field: DictionaryObject) -> str:
    parts = []
    node = field
    while node is not None:
        if "/T" in node:
            parts.append(str(node["/T"]))
        node = node["/Parent"] if "/Parent" in node else None
    return ".".join(reversed(parts))


def _field_kind(field: DictionaryObject) -> Optional[FieldKind]:
    field_type = _inherited(field, "/FT")
    if field_type == "/Tx":
        return FieldKind.TEXT
    if field_type == "/Btn":
        flags = int(_inherited(field, "/Ff") or 0)
        if flags & PUSHBUTTON_FLAG:
            return None
        if flags & RADIO_FLAG:
            return FieldKind.RADIO
        return FieldKind.CHECKBOX
    # Choice and signature fields are never written
    return None


def _widgets(pages) -> Iterator[Tuple[DictionaryObject, DictionaryObject]]:
    """(terminal field, widget) for every widget annotation; merged field/widgets yield the same object twice"""
    for page in pages:
        if "/Annots" not in page:
            continue
        for annotation in page["/Annots"]:
            widget = annotation.get_object()
            if widget.get("/Subtype") != "/Widget":
                continue
            # Kids of radio groups and split checkboxes carry no /T of their own
            if "/T" in widget or "/Parent" not in widget:
                field = widget
            else:
                field = widget["/Parent"]
            yield field, widget


def _states(widget: DictionaryObject) -> List[str]:
    if "/AP" not in widget or "/N" not in widget["/AP"]:
        return []
    normal = widget["/AP"]["/N"]
    if not isinstance(normal, DictionaryObject):
        return []
    return [str(state) for state in normal.keys()]


def _on_state(widget: DictionaryObject) -> NameObject:
    for state in _states(widget):
        if state != "/Off":
            return NameObject(state)
    return NameObject("/Yes")


def read_field_namespace(pdf_bytes: bytes) -> TemplateNamespace:
    """Fully qualified name -> kind for every writable field in the template"""
    reader = PdfReader(io.BytesIO(pdf_bytes))
    fields: Dict[str, FieldKind] = {}
    for field, _widget in _widgets(reader.pages):
        kind = _field_kind(field)
        if kind is not None:
            fields[_qualified_name(field)] = kind
    return TemplateNamespace(fields)


def _write_value(field: DictionaryObject, widget: DictionaryObject, kind: FieldKind, value: FieldValue):
    if kind == FieldKind.TEXT:
        field[NameObject("/V")] = TextStringObject(str(value))

    elif kind == FieldKind.CHECKBOX:
        state = _on_state(widget) if value else OFF
        field[NameObject("/V")] = state
        widget[NameObject("/AS")] = state

    elif kind == FieldKind.RADIO:
        option = value.option if isinstance(value, RadioChoice) else str(value)
        selected = NameObject(f"/{option}")
        field[NameObject("/V")] = selected
        widget[NameObject("/AS")] = selected if str(selected) in _states(widget) else OFF


def _field_root(annotation) -> Optional[IndirectObject]:
    reference = annotation
    node = annotation.get_object()
    while "/Parent" in node:
        reference = node.raw_get("/Parent")
        node = reference.get_object()
    return reference if isinstance(reference, IndirectObject) else None


def _root_fields(pages) -> Iterator[IndirectObject]:
    """Top of the /Parent chain for every widget, once per field tree"""
    seen = set()
    for page in pages:
        if "/Annots" not in page:
            continue
        for annotation in page.raw_get("/Annots").get_object():
            root = _field_root(annotation)
            if root is None or root.idnum in seen:
                continue
            field = root.get_object()
            if "/T" not in field and "/FT" not in field:
                continue
            seen.add(root.idnum)
            yield root


def _install_acroform(writer: PdfWriter, fields: Sequence[IndirectObject], readers: Sequence[PdfReader]):
    """
    Rebuild the writer's /AcroForm over the given root fields

    PdfWriter.append copies pages and widgets but not the form dictionary, so
    the default appearance (/DA) and resources (/DR) of the sources are carried
    over here. The first /DA wins; /DR entries are merged by name.
    """
    acro_form = DictionaryObject({
        NameObject("/Fields"): ArrayObject(fields),
        NameObject("/NeedAppearances"): BooleanObject(True),
    })
    resources = DictionaryObject()

    for reader in readers:
        root = reader.trailer["/Root"]
        if "/AcroForm" not in root:
            continue
        source = root["/AcroForm"].get_object()
        if "/DA" in source and "/DA" not in acro_form:
            acro_form[NameObject("/DA")] = source["/DA"].clone(writer)
        if "/DR" not in source:
            continue
        for category, entries in source["/DR"].get_object().items():
            entries = entries.get_object()
            if not isinstance(entries, DictionaryObject):
                continue
            merged = resources.setdefault(NameObject(category), DictionaryObject())
            for name, resource in entries.items():
                if name not in merged:
                    merged[NameObject(name)] = resource.clone(writer)

    if resources:
        acro_form[NameObject("/DR")] = resources
    writer._root_object[NameObject("/AcroForm")] = acro_form


def fill_pdf(pdf_bytes: bytes, values: Mapping[str, FieldValue]) -> bytes:
    """
    Write field values into a copy of the template

    Args:
        pdf_bytes: Template bytes (left untouched)
        values: Fully qualified field name -> text, checkbox state or radio choice

    Returns:
        Filled PDF bytes with NeedAppearances set so viewers render the values
    """
    reader = PdfReader(io.BytesIO(pdf_bytes))
    writer = PdfWriter()
    writer.append(reader)

    written = set()
    for field, widget in _widgets(writer.pages):
        name = _qualified_name(field)
        if name not in values:
            continue
        kind = _field_kind(field)
        if kind is None:
            continue
        _write_value(field, widget, kind, values[name])
        written.add(name)

    _install_acroform(writer, list(_root_fields(writer.pages)), [reader])

    unwritten = [name for name in values if name not in written]
    if unwritten:
        logger.warning("Values without a matching widget", count=len(unwritten))

    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()


def page_count(pdf_bytes: bytes) -> int:
    return len(PdfReader(io.BytesIO(pdf_bytes)).pages)


def merge_pdfs(parts: Sequence[bytes]) -> bytes:
    """
    Concatenate documents in order, keeping every page of every part

    Root fields of each part are renamed with a per-part prefix so identically
    named fields in sibling templates stay independent in the package.
    """
    writer = PdfWriter()
    readers: List[PdfReader] = []
    roots: List[IndirectObject] = []
    expected_pages = 0

    for index, part in enumerate(parts, start=1):
        reader = PdfReader(io.BytesIO(part))
        readers.append(reader)
        expected_pages += len(reader.pages)
        first_page = len(writer.pages)
        writer.append(reader)

        added = [writer.pages[page_index] for page_index in range(first_page, len(writer.pages))]
        for root in _root_fields(added):
            field = root.get_object()
            if "/T" in field:
                field[NameObject("/T")] = TextStringObject(f"part{index}_{field['/T']}")
            roots.append(root)

    if roots:
        _install_acroform(writer, roots, readers)

    if len(writer.pages) != expected_pages:
        raise ValueError(f"Merged page count {len(writer.pages)} does not match parts ({expected_pages})")

    buffer = io.BytesIO()
    writer.write(buffer)
    return buffer.getvalue()
