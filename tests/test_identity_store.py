"""
Tests for the Supabase Auth REST client with mocked requests.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.services.identity_store import IdentityStoreError, SupabaseAuthClient, get_identity_store

BASE_URL = 'https://test-project.supabase.co'


def mock_response(status_code=200, body=None):
    response = MagicMock()
    response.status_code = status_code
    response.content = b'{}' if body is not None else b''
    response.json.return_value = body if body is not None else {}
    return response


@pytest.fixture
def auth_client():
    return SupabaseAuthClient(BASE_URL, 'anon-key')


class TestSupabaseAuthClient:

    def test_requires_configuration(self):
        with pytest.raises(ValueError):
            SupabaseAuthClient(None, 'anon-key')

    def test_sign_up(self, auth_client):
        body = {'id': 'user-1', 'email': 'a@b.com', 'user_metadata': {'full_name': 'A B'}}
        with patch('app.services.identity_store.requests.request', return_value=mock_response(200, body)) as request:
            user = auth_client.sign_up('a@b.com', 'secret1', 'A B')

        assert user.id == 'user-1'
        assert user.metadata == {'full_name': 'A B'}
        method, url = request.call_args.args
        assert method == 'POST'
        assert url == f'{BASE_URL}/auth/v1/signup'
        kwargs = request.call_args.kwargs
        assert kwargs['json'] == {'email': 'a@b.com', 'password': 'secret1', 'data': {'full_name': 'A B'}}
        assert kwargs['headers']['apikey'] == 'anon-key'
        assert kwargs['timeout'] == 10

    def test_sign_up_with_autoconfirm_session(self, auth_client):
        body = {'access_token': 'tok', 'user': {'id': 'user-2', 'email': 'c@d.com'}}
        with patch('app.services.identity_store.requests.request', return_value=mock_response(200, body)):
            user = auth_client.sign_up('c@d.com', 'secret1')
        assert user.id == 'user-2'

    def test_sign_up_rejected(self, auth_client):
        body = {'msg': 'User already registered'}
        with patch('app.services.identity_store.requests.request', return_value=mock_response(422, body)):
            with pytest.raises(IdentityStoreError) as exc:
                auth_client.sign_up('a@b.com', 'secret1')
        assert exc.value.message == 'User already registered'
        assert exc.value.status_code == 422

    def test_sign_in(self, auth_client):
        body = {
            'access_token': 'tok', 'refresh_token': 'ref', 'token_type': 'bearer',
            'expires_in': 3600, 'expires_at': 1900000000,
            'user': {'id': 'user-1', 'email': 'a@b.com'}
        }
        with patch('app.services.identity_store.requests.request', return_value=mock_response(200, body)) as request:
            user, session = auth_client.sign_in_with_password('a@b.com', 'secret1')

        assert user.id == 'user-1'
        assert session.access_token == 'tok'
        assert session.expires_at == 1900000000
        assert request.call_args.kwargs['params'] == {'grant_type': 'password'}
        assert request.call_args.args[1] == f'{BASE_URL}/auth/v1/token'

    def test_get_user_sends_bearer(self, auth_client):
        body = {'id': 'user-1', 'email': 'a@b.com'}
        with patch('app.services.identity_store.requests.request', return_value=mock_response(200, body)) as request:
            user = auth_client.get_user('tok')

        assert user.email == 'a@b.com'
        assert request.call_args.kwargs['headers']['Authorization'] == 'Bearer tok'

    def test_sign_out_no_content(self, auth_client):
        with patch('app.services.identity_store.requests.request', return_value=mock_response(204)):
            assert auth_client.sign_out('tok') is None

    def test_network_error(self, auth_client):
        with patch('app.services.identity_store.requests.request',
                   side_effect=requests.exceptions.ConnectionError('down')):
            with pytest.raises(IdentityStoreError) as exc:
                auth_client.get_user('tok')
        assert exc.value.message.startswith('Connection error')


def test_get_identity_store_builds_client_from_config(app):
    app.extensions.pop('identity_store')

    store = get_identity_store()

    assert isinstance(store, SupabaseAuthClient)
    assert store.base_url == 'https://test-project.supabase.co/auth/v1'
    assert get_identity_store() is store
