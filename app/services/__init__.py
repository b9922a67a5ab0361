"""
Business logic services for the Anamola platform.
"""
from .identity_store import SupabaseAuthClient, IdentityStoreError, get_identity_store
from .membership_service import MembershipService
from .stripe_service import StripeService, StripeWebhookHandler

__all__ = [
    'SupabaseAuthClient',
    'IdentityStoreError',
    'get_identity_store',
    'MembershipService',
    'StripeService',
    'StripeWebhookHandler',
]
