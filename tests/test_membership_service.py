"""
Tests for MembershipService activation and status changes.
"""
from unittest.mock import MagicMock

import pytest

from app.models import Member, Membership
from app.services.membership_service import (
    MembershipService,
    generate_one_time_password,
)
from app.utils.exceptions import (
    AccountCreationError,
    InvalidRequestError,
    MissingFieldsError,
    PaymentIncompleteError,
)


def stripe_returning(session):
    stripe_service = MagicMock()
    stripe_service.retrieve_session.return_value = session
    return stripe_service


@pytest.fixture
def paid():
    return {
        'id': 'cs_test_svc',
        'payment_status': 'paid',
        'customer_email': 'payer@example.com',
        'metadata': {'email': 'payer@example.com', 'fullName': 'Payer Person'}
    }


class TestActivateFromPayment:

    def test_creates_active_member_and_membership(self, app, identity_store, paid):
        service = MembershipService(identity_store=identity_store, stripe_service=stripe_returning(paid))

        result = service.activate_from_payment('cs_test_svc', 'payer@example.com', 'Payer Person')

        assert result.already_processed is False
        assert result.member.membership_status == 'active'
        assert result.membership.payment_status == 'completed'
        assert result.membership.membership_type == 'Standard Membership'
        assert result.membership.user_id == result.member.id
        assert len(result.generated_password) == 12

    def test_repeat_activation_returns_existing_pair(self, app, identity_store, paid):
        service = MembershipService(identity_store=identity_store, stripe_service=stripe_returning(paid))

        first = service.activate_from_payment('cs_test_svc', 'payer@example.com', 'Payer Person')
        second = service.activate_from_payment('cs_test_svc', 'payer@example.com', 'Payer Person')

        assert second.already_processed is True
        assert second.generated_password is None
        assert second.member.id == first.member.id
        assert second.membership.id == first.membership.id
        assert Membership.query.filter_by(stripe_session_id='cs_test_svc').count() == 1

    def test_unpaid_session_has_no_side_effects(self, app, identity_store, paid):
        paid['payment_status'] = 'unpaid'
        service = MembershipService(identity_store=identity_store, stripe_service=stripe_returning(paid))

        with pytest.raises(PaymentIncompleteError) as exc:
            service.activate_from_payment('cs_test_svc', 'payer@example.com', 'Payer Person')

        assert exc.value.payment_status == 'unpaid'
        assert identity_store.sign_up_calls == []
        assert Member.query.count() == 0
        assert Membership.query.count() == 0

    def test_missing_input_skips_stripe(self, app, identity_store):
        stripe_service = MagicMock()
        service = MembershipService(identity_store=identity_store, stripe_service=stripe_service)

        with pytest.raises(MissingFieldsError) as exc:
            service.activate_from_payment('', 'payer@example.com', None)

        assert exc.value.missing_fields == ['sessionId', 'fullName']
        stripe_service.retrieve_session.assert_not_called()

    def test_session_payer_wins_over_request_body(self, app, identity_store, paid):
        service = MembershipService(identity_store=identity_store, stripe_service=stripe_returning(paid))

        result = service.activate_from_payment('cs_test_svc', 'someone-else@example.com', 'Someone Else')

        assert result.member.email == 'payer@example.com'
        assert result.member.full_name == 'Payer Person'
        assert identity_store.sign_up_calls[0]['email'] == 'payer@example.com'

    def test_request_body_used_when_session_has_no_payer(self, app, identity_store):
        session = {'id': 'cs_bare', 'payment_status': 'paid', 'metadata': {}}
        service = MembershipService(identity_store=identity_store, stripe_service=stripe_returning(session))

        result = service.activate_from_payment('cs_bare', 'body@example.com', 'Body Person', 'Founding Member')

        assert result.member.email == 'body@example.com'
        assert result.membership.membership_type == 'Founding Member'

    def test_account_creation_failure_writes_nothing(self, app, identity_store, paid):
        identity_store.fail_sign_up = True
        service = MembershipService(identity_store=identity_store, stripe_service=stripe_returning(paid))

        with pytest.raises(AccountCreationError) as exc:
            service.activate_from_payment('cs_test_svc', 'payer@example.com', 'Payer Person')

        assert exc.value.status_code == 500
        assert exc.value.message == 'Failed to create user account'
        assert Member.query.count() == 0
        assert Membership.query.count() == 0

    def test_concurrent_winner_is_reported_as_already_processed(self, app, identity_store, make_member):
        winner_member = make_member(email='winner@example.com')
        service = MembershipService(identity_store=identity_store, stripe_service=MagicMock())
        _, first = service._record_membership(winner_member, 'cs_race', 'Standard Membership')
        assert first is None

        loser_member = make_member(email='loser@example.com')
        membership, winner = service._record_membership(loser_member, 'cs_race', 'Standard Membership')

        assert membership is None
        assert winner.user_id == winner_member.id
        assert Membership.query.filter_by(stripe_session_id='cs_race').count() == 1


class TestUpdateStatus:

    def test_valid_status(self, app, sample_member):
        MembershipService.update_status(sample_member, 'suspended')
        assert Member.query.get(sample_member.id).membership_status == 'suspended'

    def test_invalid_status(self, app, sample_member):
        with pytest.raises(InvalidRequestError):
            MembershipService.update_status(sample_member, 'banned')
        assert sample_member.membership_status == 'active'


def test_one_time_password_is_alphanumeric():
    passwords = {generate_one_time_password() for _ in range(20)}
    assert len(passwords) == 20
    for password in passwords:
        assert len(password) == 12
        assert password.isalnum()
