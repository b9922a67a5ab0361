"""
Stripe integration service for membership payments.
Handles checkout sessions, payment verification, and webhooks.
"""
import logging
from typing import Optional

import stripe
from flask import current_app

from ..models import Membership
from ..utils.exceptions import UpstreamError

logger = logging.getLogger(__name__)


class StripeService:
    """Service for handling Stripe payment operations."""

    def __init__(self, api_key: Optional[str] = None):
        stripe.api_key = api_key or current_app.config.get('STRIPE_SECRET_KEY')

    def create_checkout_session(
        self,
        email: str,
        full_name: str,
        membership_type: str,
        amount: int,
        currency: str,
        frontend_url: str
    ) -> dict:
        """
        Create a one-off Stripe Checkout session for the membership fee.

        Args:
            email: Pre-filled customer email
            full_name: Applicant name (stored in metadata)
            membership_type: Product name shown on the checkout page
            amount: Fee in major currency units (100 = MT 100)
            currency: ISO currency code
            frontend_url: Base URL for the success/cancel redirects

        Returns:
            Dict with session_id and url

        Raises:
            UpstreamError: If Stripe rejects the request
        """
        try:
            session = stripe.checkout.Session.create(
                mode='payment',
                payment_method_types=['card'],
                line_items=[{
                    'price_data': {
                        'currency': currency.lower(),
                        'product_data': {
                            'name': membership_type,
                            'description': 'Anamola Party Membership',
                        },
                        'unit_amount': amount * 100,  # minor units
                    },
                    'quantity': 1,
                }],
                success_url=f'{frontend_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}',
                cancel_url=f'{frontend_url}/register',
                customer_email=email,
                metadata={
                    'email': email,
                    'fullName': full_name,
                    'membershipType': membership_type
                }
            )
        except stripe.StripeError as e:
            raise UpstreamError('Failed to create checkout session', e)

        return {
            'session_id': session['id'],
            'url': session.get('url')
        }

    def retrieve_session(self, session_id: str):
        """
        Fetch a checkout session by id.

        Raises:
            UpstreamError: If the session cannot be retrieved
        """
        try:
            return stripe.checkout.Session.retrieve(session_id)
        except stripe.StripeError as e:
            raise UpstreamError('Failed to verify payment', e)

    @staticmethod
    def construct_webhook_event(payload: bytes, sig_header: str, webhook_secret: str):
        """
        Construct and verify a Stripe webhook event.

        Args:
            payload: Raw request body
            sig_header: Stripe-Signature header
            webhook_secret: Webhook signing secret

        Returns:
            Verified Stripe event object

        Raises:
            stripe.SignatureVerificationError: If signature invalid
        """
        return stripe.Webhook.construct_event(
            payload, sig_header, webhook_secret
        )


class StripeWebhookHandler:
    """
    Handler for processing Stripe webhook events.

    Accounts are provisioned by the payment-success endpoint, which can
    hand the one-time password back to the payer; webhooks only record
    what Stripe reports.
    """

    def handle_event(self, event) -> dict:
        """
        Route and handle a Stripe webhook event.

        Args:
            event: Verified Stripe event

        Returns:
            Result dict with handled status
        """
        event_type = event['type']
        data = event['data']['object']

        handlers = {
            'checkout.session.completed': self._handle_checkout_completed,
            'checkout.session.expired': self._handle_checkout_expired,
            'checkout.session.async_payment_failed': self._handle_checkout_expired,
        }

        handler = handlers.get(event_type)
        if handler:
            return handler(data)

        return {'handled': False, 'event_type': event_type}

    def _handle_checkout_completed(self, session) -> dict:
        """Handle successful checkout session."""
        session_id = session['id']
        logger.info(f'Payment successful for session: {session_id}')

        membership = Membership.query.filter_by(stripe_session_id=session_id).first()
        if membership:
            return {
                'handled': True,
                'session_id': session_id,
                'action': 'already_activated',
                'member_id': membership.member.member_id
            }

        return {
            'handled': True,
            'session_id': session_id,
            'action': 'awaiting_confirmation'
        }

    def _handle_checkout_expired(self, session) -> dict:
        """Handle a checkout that will never be paid."""
        logger.warning(
            f"Checkout session {session['id']} ended without payment "
            f"(payment_status={session.get('payment_status')})"
        )
        return {
            'handled': True,
            'session_id': session['id'],
            'action': 'payment_abandoned'
        }
