"""
Supabase Auth (GoTrue) integration.

The identity store owns email/password accounts and session tokens.
We call its REST API directly:

    POST /auth/v1/signup                     create account
    POST /auth/v1/token?grant_type=password  sign in
    GET  /auth/v1/user                       resolve bearer token
    POST /auth/v1/logout                     revoke session

API Documentation: https://supabase.com/docs/reference/api
"""
import logging
from dataclasses import dataclass, field, asdict
from typing import Dict, Any, Optional, Tuple

import requests
from flask import current_app

logger = logging.getLogger(__name__)


class IdentityStoreError(Exception):
    """The identity store rejected a call or could not be reached."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


@dataclass
class AuthUser:
    """Identity-store account, as resolved from a token or created at signup."""
    id: str
    email: Optional[str]
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'AuthUser':
        return cls(
            id=payload['id'],
            email=payload.get('email'),
            metadata=payload.get('user_metadata') or {}
        )


@dataclass
class AuthSession:
    """Session issued on sign in."""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = 'bearer'
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> 'AuthSession':
        return cls(
            access_token=payload['access_token'],
            refresh_token=payload.get('refresh_token'),
            token_type=payload.get('token_type', 'bearer'),
            expires_in=payload.get('expires_in'),
            expires_at=payload.get('expires_at')
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SupabaseAuthClient:
    """Thin client for the Supabase Auth REST API."""

    TIMEOUT = 10

    def __init__(self, base_url: str, api_key: str):
        if not base_url or not api_key:
            raise ValueError("Supabase URL and anon key must be configured")
        self.base_url = base_url.rstrip('/') + '/auth/v1'
        self.api_key = api_key

    def _get_headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        headers = {
            'apikey': self.api_key,
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        }
        headers['Authorization'] = f'Bearer {access_token or self.api_key}'
        return headers

    def _request(self, method: str, path: str, access_token: Optional[str] = None,
                 **kwargs) -> Dict[str, Any]:
        try:
            response = requests.request(
                method,
                f'{self.base_url}{path}',
                headers=self._get_headers(access_token),
                timeout=self.TIMEOUT,
                **kwargs
            )
        except requests.exceptions.RequestException as e:
            raise IdentityStoreError(f'Connection error: {str(e)}')

        if response.status_code >= 400:
            raise IdentityStoreError(self._error_message(response), response.status_code)

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    @staticmethod
    def _error_message(response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f'API error: {response.status_code}'
        return (
            body.get('msg')
            or body.get('error_description')
            or body.get('message')
            or body.get('error')
            or f'API error: {response.status_code}'
        )

    def sign_up(self, email: str, password: str, full_name: Optional[str] = None) -> AuthUser:
        """
        Create an account.

        Returns:
            The created AuthUser

        Raises:
            IdentityStoreError: If the email is taken or the call fails
        """
        payload = {'email': email, 'password': password}
        if full_name:
            payload['data'] = {'full_name': full_name}

        data = self._request('POST', '/signup', json=payload)

        # With auto-confirm on, the user is nested next to the session
        user_payload = data.get('user') if 'access_token' in data else data
        if not user_payload or not user_payload.get('id'):
            raise IdentityStoreError('Signup response did not include a user')

        return AuthUser.from_payload(user_payload)

    def sign_in_with_password(self, email: str, password: str) -> Tuple[AuthUser, AuthSession]:
        """
        Authenticate with email and password.

        Raises:
            IdentityStoreError: If credentials are rejected
        """
        data = self._request(
            'POST', '/token',
            params={'grant_type': 'password'},
            json={'email': email, 'password': password}
        )
        return AuthUser.from_payload(data['user']), AuthSession.from_payload(data)

    def get_user(self, access_token: str) -> AuthUser:
        """
        Resolve a bearer token to its account.

        Raises:
            IdentityStoreError: If the token is invalid or expired
        """
        return AuthUser.from_payload(self._request('GET', '/user', access_token=access_token))

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind access_token."""
        self._request('POST', '/logout', access_token=access_token)


def get_identity_store():
    """
    Get the identity store for the current app.

    An instance registered under app.extensions['identity_store'] wins;
    otherwise a SupabaseAuthClient is built from config and cached there.
    """
    store = current_app.extensions.get('identity_store')
    if store is None:
        store = SupabaseAuthClient(
            current_app.config.get('SUPABASE_URL'),
            current_app.config.get('SUPABASE_ANON_KEY')
        )
        current_app.extensions['identity_store'] = store
    return store
