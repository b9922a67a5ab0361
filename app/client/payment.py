"""
Payment confirmation with bounded retries.

After Stripe redirects back, the payer's browser confirms the session
with POST /payment-success. Stripe can report a session as unpaid for a
few seconds after the redirect, and the network can drop, so confirmation
is retried a fixed number of times before giving up.
"""
import logging
import threading
import time
from enum import Enum
from typing import Any, Callable, Dict, Optional

from .api import ApiClient, ApiConnectionError, ApiError

logger = logging.getLogger(__name__)

MAX_RETRIES = 3
PROCESSING_RETRY_DELAY = 2  # seconds
NETWORK_RETRY_DELAY = 3  # seconds
SUPPORT_MESSAGE = 'Failed to verify payment. Please contact support.'


class VerificationStatus(str, Enum):
    IDLE = 'idle'
    VERIFYING = 'verifying'
    SUCCESS = 'success'
    FAILED = 'failed'


class VerificationInProgressError(Exception):
    """verify() was called while another verification was running."""


class PaymentVerificationError(Exception):
    """Verification gave up. try_again() starts over."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


PAYMENT_INCOMPLETE_MESSAGE = 'Payment not completed'


def is_payment_incomplete(error: ApiError) -> bool:
    """
    True for the 400 the server sends while Stripe has not marked the
    session paid yet. It may clear on its own.
    """
    if error.status_code != 400:
        return False
    message = (error.message or '').lower()
    return (
        message == PAYMENT_INCOMPLETE_MESSAGE.lower()
        or 'processing' in message
        or 'pending' in message
    )


class PaymentVerifier:
    """
    Confirms one checkout session against the API.

    At most 1 + max_retries calls are made per verification run, and never
    more than one run at a time.
    """

    def __init__(
        self,
        api: ApiClient,
        session_id: str,
        email: str,
        full_name: str,
        membership_type: Optional[str] = None,
        max_retries: int = MAX_RETRIES,
        sleep: Callable[[float], None] = time.sleep
    ):
        self.api = api
        self.session_id = session_id
        self.email = email
        self.full_name = full_name
        self.membership_type = membership_type
        self.max_retries = max_retries
        self._sleep = sleep
        self._in_flight = threading.Lock()

        self.status = VerificationStatus.IDLE
        self.retry_count = 0
        self.attempts = 0
        self.error: Optional[str] = None
        self.result: Optional[Dict[str, Any]] = None

    def verify(self) -> Dict[str, Any]:
        """
        Confirm the payment, retrying transient failures.

        Returns:
            The /payment-success response body

        Raises:
            VerificationInProgressError: If a verification is already running
            PaymentVerificationError: When retries are exhausted or the
                error is not retryable
        """
        if not self._in_flight.acquire(blocking=False):
            raise VerificationInProgressError('Payment verification already in progress')

        try:
            self.status = VerificationStatus.VERIFYING
            return self._run()
        finally:
            self._in_flight.release()

    def try_again(self) -> Dict[str, Any]:
        """Reset retry state after a failure and verify from scratch."""
        self.status = VerificationStatus.IDLE
        self.retry_count = 0
        self.attempts = 0
        self.error = None
        self.result = None
        return self.verify()

    def _run(self) -> Dict[str, Any]:
        while True:
            self.attempts += 1
            try:
                self.result = self.api.confirm_payment(
                    self.session_id, self.email, self.full_name, self.membership_type
                )
            except ApiConnectionError as e:
                if self.retry_count < self.max_retries:
                    self._schedule_retry(NETWORK_RETRY_DELAY, e.message)
                    continue
                self._fail(SUPPORT_MESSAGE)
            except ApiError as e:
                if is_payment_incomplete(e) and self.retry_count < self.max_retries:
                    self._schedule_retry(PROCESSING_RETRY_DELAY, e.message)
                    continue
                self._fail(e.message or 'Payment verification failed')

            self.status = VerificationStatus.SUCCESS
            logger.info(f'Payment verified for session {self.session_id} after {self.attempts} attempt(s)')
            return self.result

    def _schedule_retry(self, delay: float, reason: str) -> None:
        self.retry_count += 1
        logger.info(
            f'Payment verification retry {self.retry_count}/{self.max_retries} '
            f'in {delay}s: {reason}'
        )
        self._sleep(delay)

    def _fail(self, message: str) -> None:
        self.status = VerificationStatus.FAILED
        self.error = message
        raise PaymentVerificationError(message)
