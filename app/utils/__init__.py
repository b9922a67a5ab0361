"""
Utility modules for the Anamola API.
"""
from .logging_config import setup_logging
from .errors import (
    ErrorCode,
    error_response,
    bad_request,
    unauthorized,
    forbidden,
    not_found,
    internal_error
)
from .exceptions import (
    AnamolaError,
    InvalidRequestError,
    MissingFieldsError,
    UnauthorizedError,
    ForbiddenError,
    NotFoundError,
    DuplicateError,
    PaymentIncompleteError,
    UpstreamError,
    AccountCreationError
)
from .validation import (
    missing_fields,
    require_fields,
    is_valid_email,
    require_valid_email,
    parse_bool,
    parse_datetime
)
