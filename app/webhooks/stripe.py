"""
Stripe webhook endpoint.
Handles payment events from Stripe.
"""
import logging
import stripe
from flask import Blueprint, request, current_app

from ..schemas import WebhookAck, respond
from ..services.stripe_service import StripeService, StripeWebhookHandler
from ..utils.errors import ErrorCode, error_response

logger = logging.getLogger(__name__)

stripe_webhook_bp = Blueprint('stripe_webhook', __name__)


@stripe_webhook_bp.route('/webhook', methods=['POST'])
def handle_stripe_webhook():
    """
    Handle incoming Stripe webhook events.

    Stripe sends events for:
    - checkout.session.completed
    - checkout.session.expired
    - checkout.session.async_payment_failed

    Anything else is acknowledged and ignored.
    """
    payload = request.get_data()
    sig_header = request.headers.get('Stripe-Signature')
    webhook_secret = current_app.config.get('STRIPE_WEBHOOK_SECRET')

    if not webhook_secret:
        return error_response('Webhook secret not configured', ErrorCode.INTERNAL_ERROR, 500)

    if not sig_header:
        return error_response('Missing Stripe-Signature header', ErrorCode.INVALID_SIGNATURE, 400)

    # Verify and construct the event
    try:
        event = StripeService.construct_webhook_event(payload, sig_header, webhook_secret)
    except (stripe.SignatureVerificationError, ValueError) as e:
        return error_response(
            f'Webhook Error: {str(e)}', ErrorCode.INVALID_SIGNATURE, 400
        )

    result = StripeWebhookHandler().handle_event(event)
    logger.info(f"[Stripe Webhook] {event['type']}: {result}")

    return respond(WebhookAck())
