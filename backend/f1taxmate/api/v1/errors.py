"""
Domain error to HTTP status translation
"""

from fastapi import HTTPException, status
import structlog

from f1taxmate.core.exceptions import (
    F1TaxMateError,
    NetUnderpaymentError,
    PackageAssemblyError,
    TemplateFetchError,
    UnsupportedJurisdictionError,
    ValidationError,
)

logger = structlog.get_logger()


def http_error(error: F1TaxMateError) -> HTTPException:
    """HTTPException for a domain error; the body carries message and details"""
    detail = {"message": error.message, **error.details}

    if isinstance(error, ValidationError):
        status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
        detail["errors"] = error.errors
    elif isinstance(error, UnsupportedJurisdictionError):
        status_code = status.HTTP_400_BAD_REQUEST
    elif isinstance(error, NetUnderpaymentError):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(error, TemplateFetchError):
        status_code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(error, PackageAssemblyError) and isinstance(error.__cause__, TemplateFetchError):
        status_code = status.HTTP_502_BAD_GATEWAY
    else:
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    logger.warning("Request failed",
                  error_type=type(error).__name__,
                  status_code=status_code)
    return HTTPException(status_code=status_code, detail=detail)
