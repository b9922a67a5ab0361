"""
Shared pytest fixtures.

The app runs with TestingConfig on in-memory SQLite. The Supabase client is
replaced by FakeIdentityStore, registered where get_identity_store() looks
for it, so no test talks to the network.
"""
import time
import uuid

import pytest

from app import create_app
from app.extensions import db
from app.models import Member
from app.services.identity_store import AuthSession, AuthUser, IdentityStoreError


class FakeIdentityStore:
    """In-memory identity store that records every call."""

    def __init__(self):
        self.accounts = {}  # email -> {'id', 'password', 'full_name'}
        self.tokens = {}  # access token -> account id
        self.sign_up_calls = []
        self.signed_out = []
        self.fail_sign_up = False
        self.fail_sign_out = False

    def sign_up(self, email, password, full_name=None):
        self.sign_up_calls.append({'email': email, 'password': password, 'full_name': full_name})
        if self.fail_sign_up:
            raise IdentityStoreError('Database error saving new user', 500)
        if email in self.accounts:
            raise IdentityStoreError('User already registered', 422)

        account = {'id': str(uuid.uuid4()), 'password': password, 'full_name': full_name}
        self.accounts[email] = account
        return AuthUser(id=account['id'], email=email, metadata={'full_name': full_name})

    def sign_in_with_password(self, email, password):
        account = self.accounts.get(email)
        if not account or account['password'] != password:
            raise IdentityStoreError('Invalid login credentials', 400)

        token = self.issue_token(account['id'])
        session = AuthSession(
            access_token=token,
            refresh_token=f'refresh-{token}',
            expires_in=3600,
            expires_at=int(time.time()) + 3600
        )
        return AuthUser(id=account['id'], email=email), session

    def get_user(self, access_token):
        account_id = self.tokens.get(access_token)
        if account_id is None:
            raise IdentityStoreError('invalid JWT: unable to parse or verify signature', 401)
        email = next((e for e, a in self.accounts.items() if a['id'] == account_id), None)
        return AuthUser(id=account_id, email=email)

    def sign_out(self, access_token):
        if self.fail_sign_out:
            raise IdentityStoreError('Service unavailable', 503)
        self.tokens.pop(access_token, None)
        self.signed_out.append(access_token)

    def issue_token(self, account_id):
        token = f'token-{uuid.uuid4().hex}'
        self.tokens[token] = account_id
        return token


@pytest.fixture
def app():
    """Create application for testing."""
    app = create_app('testing')
    app.extensions['identity_store'] = FakeIdentityStore()

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def identity_store(app):
    return app.extensions['identity_store']


@pytest.fixture
def make_member(app, identity_store):
    """Factory creating an identity-store account plus its Member row."""
    def _make_member(email='member@example.com', full_name='Test Member',
                     role='member', membership_status='active', password='secret123'):
        auth_user = identity_store.sign_up(email, password, full_name)
        member = Member(
            auth_user_id=auth_user.id,
            member_id=Member.generate_member_id(),
            email=email,
            full_name=full_name,
            role=role,
            membership_status=membership_status
        )
        db.session.add(member)
        db.session.commit()
        return member
    return _make_member


@pytest.fixture
def sample_member(make_member):
    return make_member()


@pytest.fixture
def sample_admin(make_member):
    return make_member(email='admin@example.com', full_name='Test Admin', role='admin')


def bearer(token):
    return {'Authorization': f'Bearer {token}', 'Content-Type': 'application/json'}


@pytest.fixture
def headers_for(identity_store):
    """Factory returning Authorization headers for a member."""
    def _headers_for(member):
        return bearer(identity_store.issue_token(member.auth_user_id))
    return _headers_for


@pytest.fixture
def member_headers(sample_member, identity_store):
    """Authorization headers for a regular member."""
    return bearer(identity_store.issue_token(sample_member.auth_user_id))


@pytest.fixture
def admin_headers(sample_admin, identity_store):
    """Authorization headers for an admin."""
    return bearer(identity_store.issue_token(sample_admin.auth_user_id))
