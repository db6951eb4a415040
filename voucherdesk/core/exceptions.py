from typing import Optional, Any


class VoucherDeskError(Exception):
    """
    Base exception for the voucher service.
    """
    def __init__(self, message: str, code: str = "INTERNAL_ERROR", status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ResourceNotFoundError(VoucherDeskError):
    """
    Raised when a requested resource is not found.
    """
    def __init__(self, message: str = "Resource not found", code: str = "NOT_FOUND", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=404, details=details)


class VoucherNotFoundError(ResourceNotFoundError):
    """
    Raised when a voucher does not exist or belongs to another user.
    """
    def __init__(self, message: str = "Voucher not found", details: Optional[Any] = None):
        super().__init__(message, code="VOUCHER_NOT_FOUND", details=details)


class RowNotFoundError(VoucherDeskError):
    """
    Raised when a voucher's row cannot be located in its spreadsheet.
    """
    def __init__(self, message: str = "Voucher not found in sheet", details: Optional[Any] = None):
        super().__init__(message, code="ROW_NOT_FOUND", status_code=409, details=details)


class AuthenticationError(VoucherDeskError):
    """
    Raised when authentication fails.
    """
    def __init__(self, message: str = "Authentication failed", details: Optional[Any] = None):
        super().__init__(message, code="AUTHENTICATION_FAILED", status_code=401, details=details)


class ValidationError(VoucherDeskError):
    """
    Raised when input validation fails.
    """
    def __init__(self, message: str = "Validation error", details: Optional[Any] = None):
        super().__init__(message, code="VALIDATION_ERROR", status_code=422, details=details)


class InvalidCategoryError(VoucherDeskError):
    """
    Raised when the company is not part of the fixed registry.
    """
    def __init__(self, message: str = "Invalid filter option", details: Optional[Any] = None):
        super().__init__(message, code="INVALID_CATEGORY", status_code=400, details=details)


class RenderError(VoucherDeskError):
    """
    Raised when the voucher PDF cannot be written.
    """
    def __init__(self, message: str = "Failed to create PDF", details: Optional[Any] = None):
        super().__init__(message, code="RENDER_FAILED", status_code=500, details=details)


class ExternalServiceError(VoucherDeskError):
    """
    Raised when an external service (Google Sheets, Drive, userinfo) fails.
    """
    def __init__(self, message: str = "External service error", code: str = "EXTERNAL_SERVICE_ERROR", details: Optional[Any] = None):
        super().__init__(message, code=code, status_code=502, details=details)


class ProvisioningError(ExternalServiceError):
    """
    Raised when the spreadsheet or Drive folder for a workspace cannot be created.
    """
    def __init__(self, message: str = "Failed to provision workspace", details: Optional[Any] = None):
        super().__init__(message, code="PROVISIONING_FAILED", details=details)


class UpstreamWriteError(ExternalServiceError):
    """
    Raised when a spreadsheet, Drive or database write fails mid-sequence.
    """
    def __init__(self, message: str = "Upstream write failed", details: Optional[Any] = None):
        super().__init__(message, code="UPSTREAM_WRITE_FAILED", details=details)
