"""
Domain Exceptions

Every error raised by the computation, form and packaging services derives
from F1TaxMateError so the API layer can translate them in one place.
"""

from typing import Any, Dict, List, Optional


class F1TaxMateError(Exception):
    """Base error for all F1TaxMate failures.

    Attributes:
        message: Human-readable description.
        details: Extra context (never PII).
        recoverable: Whether the caller may retry or take another path.
    """

    def __init__(
        self,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.recoverable = recoverable

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"recoverable={self.recoverable!r})"
        )


class ValidationError(F1TaxMateError):
    """Filing data failed the validation boundary; computation must not run."""

    def __init__(
        self,
        message: str,
        *,
        errors: Optional[List[str]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, details=details, recoverable=True)
        self.errors = errors or []


class UnsupportedJurisdictionError(F1TaxMateError):
    """No rule is registered for the requested country or state."""

    def __init__(self, message: str, *, jurisdiction: str, kind: str) -> None:
        super().__init__(
            message,
            details={"jurisdiction": jurisdiction, "kind": kind},
            recoverable=False,
        )
        self.jurisdiction = jurisdiction
        self.kind = kind


class TaxComputationError(F1TaxMateError):
    """Unexpected failure inside a tax rule."""


class TemplateNotFoundError(F1TaxMateError):
    """The requested PDF template does not exist in the template store."""

    def __init__(self, message: str, *, template: str) -> None:
        super().__init__(message, details={"template": template}, recoverable=False)
        self.template = template


class TemplateFetchError(F1TaxMateError):
    """Template store unreachable or timed out. Callers may retry."""

    def __init__(self, message: str, *, template: str) -> None:
        super().__init__(message, details={"template": template}, recoverable=True)
        self.template = template


class TemplateFieldMissingError(F1TaxMateError):
    """Required template fields are absent (raised only in strict mode)."""

    def __init__(self, message: str, *, document: str, fields: List[str]) -> None:
        super().__init__(message, details={"document": document, "fields": fields})
        self.document = document
        self.fields = fields


class FormGenerationError(F1TaxMateError):
    """Filling a single sub-document failed."""

    def __init__(self, message: str, *, document: str) -> None:
        super().__init__(message, details={"document": document})
        self.document = document


class PackageAssemblyError(F1TaxMateError):
    """A required sub-document failed, so the package cannot be produced."""

    def __init__(self, message: str, *, product: str, document: Optional[str] = None) -> None:
        super().__init__(message, details={"product": product, "document": document})
        self.product = product
        self.document = document


class NetUnderpaymentError(F1TaxMateError):
    """Business-rule refusal: combined federal and state balance is owed to the government."""

    def __init__(self, message: str, *, total_owed: int, total_refund: int) -> None:
        super().__init__(
            message,
            details={"total_owed": total_owed, "total_refund": total_refund},
            recoverable=False,
        )
        self.total_owed = total_owed
        self.total_refund = total_refund
