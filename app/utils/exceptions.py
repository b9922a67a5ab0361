"""
Custom exceptions for Anamola business logic.

Each exception carries the HTTP status it maps to, so services can raise
them and the app-level error handler renders {"error": message}.
"""
from .errors import ErrorCode


class AnamolaError(Exception):
    """Base exception for all Anamola business logic errors."""

    status_code = 500

    def __init__(self, message: str, code: str = "ANAMOLA_ERROR"):
        self.message = message
        self.code = code
        super().__init__(message)


class InvalidRequestError(AnamolaError):
    """Missing or malformed input."""

    status_code = 400

    def __init__(self, message: str, missing_fields: list = None):
        self.missing_fields = missing_fields or []
        super().__init__(message, ErrorCode.INVALID_REQUEST)


class MissingFieldsError(InvalidRequestError):
    """One or more required fields absent from the request body."""

    def __init__(self, missing_fields: list):
        message = f"Missing required fields: {', '.join(missing_fields)}"
        super().__init__(message, missing_fields)
        self.code = ErrorCode.MISSING_FIELD


class UnauthorizedError(AnamolaError):
    """Missing or invalid bearer token."""

    status_code = 401

    def __init__(self, message: str = "Access token required", code: ErrorCode = ErrorCode.AUTH_REQUIRED):
        super().__init__(message, code)


class ForbiddenError(AnamolaError):
    """Authenticated but lacking the required role."""

    status_code = 403

    def __init__(self, message: str = "Admin access required"):
        super().__init__(message, ErrorCode.PERMISSION_DENIED)


class NotFoundError(AnamolaError):
    """Resource not found."""

    status_code = 404

    def __init__(self, resource: str, identifier=None):
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with ID {identifier} not found"
        super().__init__(message, f"{resource.upper()}_NOT_FOUND")


class DuplicateError(AnamolaError):
    """Resource already exists."""

    status_code = 400

    def __init__(self, message: str = "User already exists"):
        super().__init__(message, "DUPLICATE_ENTRY")


class PaymentIncompleteError(AnamolaError):
    """Payment session verified but not paid."""

    status_code = 400

    def __init__(self, payment_status: str = None):
        self.payment_status = payment_status
        super().__init__("Payment not completed", "PAYMENT_INCOMPLETE")


class UpstreamError(AnamolaError):
    """Identity store, content store or payment provider call failed."""

    status_code = 500

    def __init__(self, message: str, original_error: Exception = None):
        self.original_error = original_error
        super().__init__(message, ErrorCode.EXTERNAL_SERVICE_ERROR)


class AccountCreationError(UpstreamError):
    """The identity store refused to create the account."""

    def __init__(self, original_error: Exception = None):
        super().__init__("Failed to create user account", original_error)
        self.code = "ACCOUNT_CREATION_FAILED"
