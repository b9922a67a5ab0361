"""
Four-step membership registration wizard.

PersonalInfo -> Address -> Documents -> Verification. Each step's fields
must be filled before moving forward; moving back is always allowed and
keeps everything entered so far. Submitting the last step opens a Stripe
checkout session.
"""
from enum import IntEnum
from typing import Any, Dict, Optional

from ..utils.validation import is_valid_email
from .api import ApiClient

DEFAULT_MEMBERSHIP_TYPE = 'Standard Membership'


class WizardStep(IntEnum):
    PERSONAL_INFO = 1
    ADDRESS = 2
    DOCUMENTS = 3
    VERIFICATION = 4


# field -> message shown when it is empty
STEP_FIELDS = {
    WizardStep.PERSONAL_INFO: {
        'fullName': 'Full name is required',
        'email': 'Email is required',
        'dateOfBirth': 'Date of birth is required',
        'phone': 'Phone number is required',
        'contactPreference': 'Contact preference is required',
    },
    WizardStep.ADDRESS: {
        'streetAddress': 'Street address is required',
        'city': 'City is required',
        'province': 'Province is required',
        'postalCode': 'Postal code is required',
    },
    WizardStep.DOCUMENTS: {
        'idNumber': 'ID number is required',
        'idType': 'ID type is required',
        'idImage': 'ID image is required',
        'profilePhoto': 'Profile photo is required',
    },
    WizardStep.VERIFICATION: {
        'termsAccepted': 'You must accept the terms and conditions',
    },
}


class StepValidationError(Exception):
    """The current step has empty or invalid fields."""

    def __init__(self, step: WizardStep, errors: Dict[str, str]):
        self.step = step
        self.errors = errors
        super().__init__(f"{step.name} is incomplete: {', '.join(errors)}")


class RegistrationWizard:
    """
    In-memory registration form.

    Nothing is persisted; the collected data lives as long as the wizard.
    """

    def __init__(self, api: ApiClient, membership_type: str = DEFAULT_MEMBERSHIP_TYPE):
        self.api = api
        self.membership_type = membership_type
        self.step = WizardStep.PERSONAL_INFO
        self.data: Dict[str, Any] = {'termsAccepted': False}
        self.errors: Dict[str, str] = {}

    def update(self, **fields) -> None:
        """Set form fields; clears errors for the fields touched."""
        for name, value in fields.items():
            self.data[name] = value
            self.errors.pop(name, None)

    def validate_step(self, step: Optional[WizardStep] = None) -> Dict[str, str]:
        """Errors for a step (the current one by default), keyed by field."""
        step = step or self.step
        errors = {}
        for name, message in STEP_FIELDS[step].items():
            value = self.data.get(name)
            if isinstance(value, str):
                value = value.strip()
            if not value:
                errors[name] = message

        if step == WizardStep.PERSONAL_INFO and 'email' not in errors:
            if not is_valid_email(str(self.data['email']).strip()):
                errors['email'] = 'Please enter a valid email address'

        self.errors = errors
        return errors

    def _require_valid(self) -> None:
        errors = self.validate_step()
        if errors:
            raise StepValidationError(self.step, errors)

    def next_step(self) -> WizardStep:
        """
        Advance one step.

        Raises:
            StepValidationError: If the current step is incomplete
        """
        self._require_valid()
        if self.step < WizardStep.VERIFICATION:
            self.step = WizardStep(self.step + 1)
        return self.step

    def previous_step(self) -> WizardStep:
        if self.step > WizardStep.PERSONAL_INFO:
            self.step = WizardStep(self.step - 1)
        self.errors = {}
        return self.step

    @property
    def progress(self) -> float:
        return self.step / len(WizardStep)

    def submit(self) -> Dict[str, Any]:
        """
        Open a checkout session for the collected applicant.

        Returns:
            The /create-checkout-session body (sessionId, url)

        Raises:
            StepValidationError: If not on the last step or it is incomplete
            ApiError: If the API refuses the request
        """
        if self.step != WizardStep.VERIFICATION:
            raise StepValidationError(self.step, {'step': 'Complete every step before submitting'})
        self._require_valid()

        return self.api.create_checkout_session(
            email=self.data['email'].strip(),
            full_name=self.data['fullName'].strip(),
            membership_type=self.membership_type
        )
