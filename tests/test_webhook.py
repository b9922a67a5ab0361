"""
Tests for POST /api/webhook.

Signatures are generated with the webhook secret from TestingConfig using
Stripe's scheme: header "t=<timestamp>,v1=<hex hmac-sha256 of 't.payload'>".
"""
import hashlib
import hmac
import json
import time
from decimal import Decimal

from app.extensions import db
from app.models import Membership
from app.services.stripe_service import StripeWebhookHandler

WEBHOOK_SECRET = 'whsec_test_secret'


def generate_stripe_signature(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int = None) -> str:
    """Generate a Stripe-Signature header value."""
    timestamp = timestamp or int(time.time())
    signed_payload = f'{timestamp}.{payload}'
    signature = hmac.new(secret.encode('utf-8'), signed_payload.encode('utf-8'), hashlib.sha256).hexdigest()
    return f't={timestamp},v1={signature}'


def make_event(event_type, session):
    return {
        'id': 'evt_test_1',
        'object': 'event',
        'type': event_type,
        'data': {'object': session}
    }


def post_event(client, event, signature=None):
    payload = json.dumps(event)
    headers = {'Content-Type': 'application/json'}
    headers['Stripe-Signature'] = signature or generate_stripe_signature(payload)
    return client.post('/api/webhook', data=payload, headers=headers)


class TestWebhookEndpoint:

    def test_checkout_completed_acknowledged(self, client):
        event = make_event('checkout.session.completed',
                           {'id': 'cs_test_hook', 'object': 'checkout.session', 'payment_status': 'paid'})

        response = post_event(client, event)

        assert response.status_code == 200
        assert response.get_json() == {'received': True}

    def test_unhandled_event_acknowledged(self, client):
        event = make_event('invoice.paid', {'id': 'in_1', 'object': 'invoice'})

        response = post_event(client, event)

        assert response.status_code == 200
        assert response.get_json() == {'received': True}

    def test_bad_signature(self, client):
        event = make_event('checkout.session.completed', {'id': 'cs_x', 'object': 'checkout.session'})
        payload = json.dumps(event)

        response = post_event(client, event, generate_stripe_signature(payload, secret='whsec_wrong'))

        assert response.status_code == 400
        assert response.get_json()['error'].startswith('Webhook Error')

    def test_missing_signature(self, client):
        response = client.post('/api/webhook', data='{}', headers={'Content-Type': 'application/json'})

        assert response.status_code == 400
        assert response.get_json() == {'error': 'Missing Stripe-Signature header'}

    def test_missing_secret(self, app, client):
        app.config['STRIPE_WEBHOOK_SECRET'] = None
        event = make_event('checkout.session.completed', {'id': 'cs_x', 'object': 'checkout.session'})

        response = post_event(client, event)

        assert response.status_code == 500


class TestStripeWebhookHandler:

    def test_completed_before_confirmation(self, app):
        result = StripeWebhookHandler().handle_event(
            make_event('checkout.session.completed', {'id': 'cs_new'})
        )
        assert result == {'handled': True, 'session_id': 'cs_new', 'action': 'awaiting_confirmation'}

    def test_completed_after_confirmation(self, app, sample_member):
        db.session.add(Membership(user_id=sample_member.id, membership_type='Standard Membership',
                                  amount=Decimal('100'), currency='MZN',
                                  payment_status='completed', stripe_session_id='cs_done'))
        db.session.commit()

        result = StripeWebhookHandler().handle_event(
            make_event('checkout.session.completed', {'id': 'cs_done'})
        )

        assert result['action'] == 'already_activated'
        assert result['member_id'] == sample_member.member_id

    def test_expired_session(self, app):
        result = StripeWebhookHandler().handle_event(
            make_event('checkout.session.expired', {'id': 'cs_gone', 'payment_status': 'unpaid'})
        )
        assert result['action'] == 'payment_abandoned'

    def test_unknown_event_type(self, app):
        result = StripeWebhookHandler().handle_event(make_event('customer.created', {'id': 'cus_1'}))
        assert result == {'handled': False, 'event_type': 'customer.created'}
