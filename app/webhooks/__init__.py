"""
Webhook handlers for the Anamola platform.
Processes Stripe payment events.
"""
from .stripe import stripe_webhook_bp

__all__ = [
    'stripe_webhook_bp',
]
