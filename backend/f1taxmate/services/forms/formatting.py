"""
Display formatting for PDF form fields
"""

import math
import re
from datetime import date
from decimal import Decimal
from typing import NamedTuple, Optional, Tuple, Union

Amount = Union[Decimal, int]


class PhoneParts(NamedTuple):
    area_code: str
    number: str


def digits_only(value: Optional[str]) -> str:
    return re.sub(r"[^\d]", "", value or "")


def format_whole_dollars(amount: Amount) -> str:
    """Floored to whole dollars (the supported forms print their own cents)"""
    return str(math.floor(amount))


def format_date(value: Optional[date]) -> str:
    """MM/DD/YYYY"""
    if value is None:
        return ""
    return value.strftime("%m/%d/%Y")


def format_date_short_year(value: Optional[date]) -> str:
    """MM/DD/YY (Schedule O Line G)"""
    if value is None:
        return ""
    return value.strftime("%m/%d/%y")


def format_ssn(ssn: Optional[str]) -> str:
    """XXX-XX-XXXX when all nine digits are present, otherwise the cleaned digits"""
    cleaned = digits_only(ssn)
    if len(cleaned) == 9:
        return f"{cleaned[:3]}-{cleaned[3:5]}-{cleaned[5:]}"
    return cleaned


def split_ssn(ssn: Optional[str]) -> Tuple[str, str, str]:
    """Three-box SSN layout used by Illinois schedules"""
    cleaned = digits_only(ssn)
    first = cleaned[:3]
    middle = cleaned[3:5] if len(cleaned) >= 5 else ""
    last = cleaned[5:9] if len(cleaned) >= 9 else ""
    return first, middle, last


def format_ein(ein: Optional[str]) -> str:
    """XX-XXXXXXX when all nine digits are present, otherwise the cleaned digits"""
    cleaned = digits_only(ein)
    if len(cleaned) == 9:
        return f"{cleaned[:2]}-{cleaned[2:]}"
    return cleaned


def split_phone(phone: Optional[str]) -> PhoneParts:
    """Area code and local number; short numbers go entirely into the number"""
    cleaned = digits_only(phone)
    if len(cleaned) >= 10:
        return PhoneParts(area_code=cleaned[:3], number=cleaned[3:])
    return PhoneParts(area_code="", number=cleaned)


def join_present(parts, separator: str = ", ") -> str:
    return separator.join(part for part in parts if part)
