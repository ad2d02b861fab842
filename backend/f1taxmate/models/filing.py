"""
Filing Models (collected filer data)

One FormData instance describes a single filer for a single tax year. It is
built from the guided questionnaire, used for one request and never stored.
"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Optional, List
from datetime import date
from decimal import Decimal
from enum import Enum


class IncomeState(str, Enum):
    """State where U.S. income was earned"""
    ILLINOIS = "Illinois"
    OTHER = "Other"


class AccountType(str, Enum):
    """Direct deposit account types"""
    CHECKING = "checking"
    SAVINGS = "savings"


class FilingModel(BaseModel):
    """Base for filing models: snake_case attributes, camelCase accepted on input"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        frozen = True


def _blank_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value


class USAddress(FilingModel):
    """U.S. mailing address"""
    address: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    state: str = ""
    county: Optional[str] = None
    zip_code: str = ""


class ForeignAddress(FilingModel):
    """Address in the country of residence"""
    address_line1: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    state_province: Optional[str] = None
    postal_code: Optional[str] = None
    country: str = ""


class InstitutionAddress(FilingModel):
    """University or advisor address"""
    address: str = ""
    address_line2: Optional[str] = None
    city: str = ""
    state: str = ""
    zip_code: str = ""


class PersonalInfo(FilingModel):
    """Filer identity and contact details"""
    first_name: str
    last_name: str
    date_of_birth: Optional[date] = None
    phone: str = ""
    email: str = ""
    passport_number: str = ""
    visa_type: str = ""
    occupation_type: str = "Student"
    us_address: USAddress = Field(default_factory=USAddress)
    foreign_address: ForeignAddress = Field(default_factory=ForeignAddress)

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def blank_dates_to_none(cls, value):
        return _blank_to_none(value)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class UniversityInfo(FilingModel):
    """Academic institution and DSO (international student advisor)"""
    university_name: str = ""
    university_address: InstitutionAddress = Field(default_factory=InstitutionAddress)
    university_contact_number: str = ""
    iss_advisor_name: str = ""
    iss_advisor_address: InstitutionAddress = Field(default_factory=InstitutionAddress)
    iss_advisor_contact_number: str = ""
    same_as_university: bool = False


class Visit(FilingModel):
    """One stay in the U.S.; exit_date of None means still present"""
    visa_type: str = ""
    entry_date: Optional[date] = None
    exit_date: Optional[date] = None

    @field_validator("entry_date", "exit_date", mode="before")
    @classmethod
    def blank_dates_to_none(cls, value):
        return _blank_to_none(value)


class ResidencyInfo(FilingModel):
    """Travel history and prior filings"""
    date_of_first_visit: Optional[date] = None
    visits: List[Visit] = Field(default_factory=list)
    has_filed_tax_return_before: bool = False
    year_filed: Optional[str] = None
    form_used: Optional[str] = None

    @field_validator("date_of_first_visit", mode="before")
    @classmethod
    def blank_dates_to_none(cls, value):
        return _blank_to_none(value)


class W2Form(FilingModel):
    """Form W-2 wage statement"""
    wages: Decimal = Field(default=Decimal("0"), ge=0)
    federal_tax_withheld: Decimal = Field(default=Decimal("0"), ge=0)
    state_tax_withheld: Decimal = Field(default=Decimal("0"), ge=0)
    social_security_withheld: Decimal = Field(default=Decimal("0"), ge=0)  # Box 4
    medicare_withheld: Decimal = Field(default=Decimal("0"), ge=0)  # Box 6
    ein: str = ""

    @property
    def fica_withheld(self) -> Decimal:
        return self.social_security_withheld + self.medicare_withheld


class Form1099INT(FilingModel):
    """Form 1099-INT interest income"""
    interest_income: Decimal = Field(default=Decimal("0"), ge=0)
    federal_tax_withheld: Decimal = Field(default=Decimal("0"), ge=0)
    state_tax_withheld: Decimal = Field(default=Decimal("0"), ge=0)
    payer_tin: str = ""
    income_type_description: str = ""


class Form1099MISC(FilingModel):
    """Form 1099-MISC other income"""
    other_income: Decimal = Field(default=Decimal("0"), ge=0)
    federal_tax_withheld: Decimal = Field(default=Decimal("0"), ge=0)
    state_tax_withheld: Decimal = Field(default=Decimal("0"), ge=0)
    payer_tin: str = ""
    income_type_description: str = ""


class FICAEmployerEntry(FilingModel):
    """Employer identity for a W-2 with FICA withheld (same order as those W-2s)"""
    employer_name: str = ""
    employer_address: str = ""


class BankDetails(FilingModel):
    """Direct deposit instructions for refunds"""
    account_number: str = ""
    routing_number: str = ""
    account_type: AccountType = AccountType.CHECKING


class IncomeInfo(FilingModel):
    """U.S. income and withholding for the tax year"""
    had_us_income: bool = Field(default=False, alias="hadUSIncome")
    income_state: Optional[IncomeState] = None
    ssn: Optional[str] = None
    w2_forms: List[W2Form] = Field(default_factory=list)
    form_1099_int: List[Form1099INT] = Field(default_factory=list, alias="form1099INT")
    form_1099_misc: List[Form1099MISC] = Field(default_factory=list, alias="form1099MISC")
    fica_employer_info: Optional[List[FICAEmployerEntry]] = None
    bank_details: Optional[BankDetails] = None

    @field_validator("income_state", "ssn", mode="before")
    @classmethod
    def blank_optionals_to_none(cls, value):
        return _blank_to_none(value)


class FormData(FilingModel):
    """Complete questionnaire for one filer"""
    personal_info: PersonalInfo
    university_info: UniversityInfo = Field(default_factory=UniversityInfo)
    residency_info: ResidencyInfo = Field(default_factory=ResidencyInfo)
    income_info: IncomeInfo = Field(default_factory=IncomeInfo)
