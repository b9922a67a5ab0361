"""
Python client for the Anamola API.
"""
from .api import ApiClient, ApiConnectionError, ApiError
from .payment import (
    PaymentVerificationError,
    PaymentVerifier,
    VerificationInProgressError,
    VerificationStatus,
)
from .session import ClientSession, SessionExpiredError
from .wizard import RegistrationWizard, StepValidationError, WizardStep
