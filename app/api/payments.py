"""
Payment API endpoints.
Stripe checkout creation and payment confirmation (membership activation).
"""
import logging
from flask import Blueprint, request, current_app

from ..schemas import (
    CheckoutSessionResponse,
    ConfigResponse,
    MemberRecord,
    MembershipRecord,
    PaymentSuccessResponse,
    respond,
)
from ..services.membership_service import MembershipService
from ..services.stripe_service import StripeService
from ..utils.validation import require_fields

logger = logging.getLogger(__name__)

payments_bp = Blueprint('payments', __name__)


@payments_bp.route('/config', methods=['GET'])
def get_payment_config():
    """Publishable Stripe key for the frontend's hosted-checkout redirect."""
    return respond(ConfigResponse(
        publishable_key=current_app.config.get('STRIPE_PUBLISHABLE_KEY')
    ))


@payments_bp.route('/create-checkout-session', methods=['POST'])
def create_checkout_session():
    """
    Create a Stripe Checkout session for the membership fee.

    Request body:
        email: string (required)
        fullName: string (required)
        membershipType: string (optional, default 'Standard Membership')

    Returns:
        sessionId and hosted checkout url
    """
    data = request.get_json(silent=True) or {}
    require_fields(data, ['email', 'fullName'])

    config = current_app.config
    result = StripeService().create_checkout_session(
        email=data['email'],
        full_name=data['fullName'],
        membership_type=data.get('membershipType') or config['DEFAULT_MEMBERSHIP_TYPE'],
        amount=config['MEMBERSHIP_AMOUNT'],
        currency=config['MEMBERSHIP_CURRENCY'],
        frontend_url=config['FRONTEND_URL']
    )

    logger.info(f"Created checkout session {result['session_id']}")
    return respond(CheckoutSessionResponse(session_id=result['session_id'], url=result['url']))


@payments_bp.route('/payment-success', methods=['POST'])
def payment_success():
    """
    Confirm a paid checkout session and activate the membership.

    Request body:
        sessionId: string (required)
        email: string (required)
        fullName: string (required)
        membershipType: string (optional)

    Returns:
        The member and, on first confirmation only, the generated password
    """
    data = request.get_json(silent=True) or {}
    require_fields(data, ['sessionId', 'email', 'fullName'])

    result = MembershipService().activate_from_payment(
        session_id=data['sessionId'],
        email=data['email'],
        full_name=data['fullName'],
        membership_type=data.get('membershipType')
    )

    if result.already_processed:
        message = 'Payment already processed'
    else:
        message = 'Payment successful and account created'

    return respond(PaymentSuccessResponse(
        message=message,
        user=MemberRecord.model_validate(result.member.to_dict()),
        membership=(
            MembershipRecord.model_validate(result.membership.to_dict())
            if result.membership else None
        ),
        password=result.generated_password,
        already_processed=result.already_processed
    ))
