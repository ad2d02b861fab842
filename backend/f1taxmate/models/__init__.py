# Models package - Export all models

from .filing import (
    FormData, PersonalInfo, UniversityInfo, ResidencyInfo, IncomeInfo,
    USAddress, ForeignAddress, InstitutionAddress, Visit,
    W2Form, Form1099INT, Form1099MISC, FICAEmployerEntry, BankDetails,
    IncomeState, AccountType
)

from .tax_result import (
    TaxResult, FederalTaxResult, StateTaxResult,
    FederalBreakdown, StateBreakdown, FederalForms, StateForms,
    minimal_tax_result_for_8843
)

from .forms import (
    FormType, FieldKind, FieldValue, RadioChoice, FillReport,
    ProductId, ProductOption, SubDocumentResult, GeneratedPackage,
    TEMPLATE_PATHS, kind_of
)

from .responses import TaxComputeResponse, ProductsResponse

__all__ = [
    # Filing models
    "FormData", "PersonalInfo", "UniversityInfo", "ResidencyInfo", "IncomeInfo",
    "USAddress", "ForeignAddress", "InstitutionAddress", "Visit",
    "W2Form", "Form1099INT", "Form1099MISC", "FICAEmployerEntry", "BankDetails",
    "IncomeState", "AccountType",

    # Tax result models
    "TaxResult", "FederalTaxResult", "StateTaxResult",
    "FederalBreakdown", "StateBreakdown", "FederalForms", "StateForms",
    "minimal_tax_result_for_8843",

    # Form and package models
    "FormType", "FieldKind", "FieldValue", "RadioChoice", "FillReport",
    "ProductId", "ProductOption", "SubDocumentResult", "GeneratedPackage",
    "TEMPLATE_PATHS", "kind_of",

    # API responses
    "TaxComputeResponse", "ProductsResponse",
]
