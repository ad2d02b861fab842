"""
Forms Models (Template Filling and Packages)
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, List, Union
from enum import Enum


class FormType(str, Enum):
    """Fillable documents supported by the form mappers"""
    FORM_8843 = "8843"
    FORM_1040NR = "1040NR"
    FORM_1040NR_SCHEDULE_O = "1040NR-O"
    FORM_843 = "843"
    FORM_8316 = "8316"
    FORM_IL1040 = "IL-1040"
    FORM_IL1040_SCHEDULE_NR = "IL-1040-NR"
    FORM_IL1040_SCHEDULE_IL_WIT = "IL-1040-IL-WIT"


# Template asset per document, relative to the template store root
TEMPLATE_PATHS: Dict[FormType, str] = {
    FormType.FORM_8843: "federal_forms/f8843.pdf",
    FormType.FORM_1040NR: "federal_forms/f1040nr.pdf",
    FormType.FORM_1040NR_SCHEDULE_O: "federal_forms/f1040nro.pdf",
    FormType.FORM_843: "FICA_forms/f843.pdf",
    FormType.FORM_8316: "FICA_forms/f8316.pdf",
    FormType.FORM_IL1040: "illinois_forms/il-1040.pdf",
    FormType.FORM_IL1040_SCHEDULE_NR: "illinois_forms/il-1040-schedule-nr.pdf",
    FormType.FORM_IL1040_SCHEDULE_IL_WIT: "illinois_forms/il-1040-schedule-il-wit.pdf",
}


class FieldKind(str, Enum):
    """AcroForm field kinds the filler can write"""
    TEXT = "text"
    CHECKBOX = "checkbox"
    RADIO = "radio"


class RadioChoice(BaseModel):
    """Selected export value of a radio group"""
    option: str

    class Config:
        frozen = True


FieldValue = Union[str, bool, RadioChoice]


def kind_of(value: FieldValue) -> FieldKind:
    """Field kind a mapped value is meant for"""
    if isinstance(value, RadioChoice):
        return FieldKind.RADIO
    if isinstance(value, bool):
        return FieldKind.CHECKBOX
    return FieldKind.TEXT


class FillReport(BaseModel):
    """Outcome of mapping one document onto its template namespace"""
    form_type: FormType
    values: Dict[str, FieldValue] = Field(default_factory=dict)
    missing_optional: List[str] = Field(default_factory=list)
    missing_required: List[str] = Field(default_factory=list)
    kind_mismatches: List[str] = Field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.missing_required


class ProductId(str, Enum):
    """Deliverable bundles"""
    FORM_8843 = "form8843"
    FEDERAL = "federal"
    ILLINOIS = "illinois"
    FICA = "fica"


class ProductOption(BaseModel):
    """Product offered to the filer"""
    id: ProductId
    label: str
    description: str


class SubDocumentResult(BaseModel):
    """One sub-document inside a package"""
    form_type: Optional[FormType] = None
    title: str
    page_count: int
    placeholder: bool = False
    missing_optional: List[str] = Field(default_factory=list)
    missing_required: List[str] = Field(default_factory=list)


class GeneratedPackage(BaseModel):
    """Assembled output document for one product"""
    product_id: ProductId
    filename: str
    content: bytes
    page_count: int
    documents: List[SubDocumentResult] = Field(default_factory=list)
