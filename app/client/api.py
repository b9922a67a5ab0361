"""
HTTP client for the Anamola API.

Used by scripts and by the registration wizard and payment verifier in
this package. Every call returns the decoded JSON body or raises ApiError.
"""
import logging
from typing import Any, Dict, Optional

import requests

from .session import ClientSession

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """The API answered with an error body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ApiConnectionError(ApiError):
    """The API could not be reached."""


class ApiClient:
    """
    Anamola API client.

    Holds the logged-in ClientSession; authenticated calls take their
    bearer token from it and refuse to run once it has expired.
    """

    TIMEOUT = 10

    def __init__(self, base_url: str = 'http://localhost:5000'):
        self.base_url = base_url.rstrip('/')
        self.session: Optional[ClientSession] = None

    def _get_headers(self, authenticated: bool = False) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json'
        }
        if authenticated:
            if self.session is None:
                raise ApiError('Not logged in', 401)
            headers['Authorization'] = f'Bearer {self.session.bearer_token()}'
        return headers

    def request(self, method: str, endpoint: str, body: Optional[dict] = None,
                authenticated: bool = False) -> Dict[str, Any]:
        """
        Send a request to /api<endpoint>.

        Raises:
            ApiConnectionError: On network failure
            ApiError: On any 4xx/5xx response
        """
        try:
            response = requests.request(
                method,
                f'{self.base_url}/api{endpoint}',
                headers=self._get_headers(authenticated),
                json=body,
                timeout=self.TIMEOUT
            )
        except requests.exceptions.RequestException as e:
            logger.warning(f'API request error for {endpoint}: {e}')
            raise ApiConnectionError(f'Connection error: {str(e)}')

        try:
            data = response.json()
        except ValueError:
            data = {}

        if not response.ok:
            raise ApiError(
                data.get('error') or f'HTTP error! status: {response.status_code}',
                response.status_code
            )
        return data

    def get(self, endpoint: str, authenticated: bool = False) -> Dict[str, Any]:
        return self.request('GET', endpoint, authenticated=authenticated)

    def post(self, endpoint: str, body: Optional[dict] = None,
             authenticated: bool = False) -> Dict[str, Any]:
        return self.request('POST', endpoint, body or {}, authenticated)

    def put(self, endpoint: str, body: Optional[dict] = None,
            authenticated: bool = False) -> Dict[str, Any]:
        return self.request('PUT', endpoint, body or {}, authenticated)

    def delete(self, endpoint: str, authenticated: bool = False) -> Dict[str, Any]:
        return self.request('DELETE', endpoint, authenticated=authenticated)

    # ==================== AUTH ====================

    def register(self, user_data: dict) -> Dict[str, Any]:
        return self.post('/register', user_data)

    def login(self, email: str, password: str) -> ClientSession:
        """Log in and keep the session for authenticated calls."""
        body = self.post('/login', {'email': email, 'password': password})
        self.session = ClientSession.from_login(body)
        return self.session

    def logout(self) -> None:
        """Revoke the session server-side. Local state is cleared either way."""
        if self.session is None:
            return
        try:
            self.post('/logout', authenticated=True)
        finally:
            self.session = None

    def get_current_user(self) -> Dict[str, Any]:
        return self.get('/user', authenticated=True)

    # ==================== PAYMENTS ====================

    def get_config(self) -> Dict[str, Any]:
        return self.get('/config')

    def create_checkout_session(self, email: str, full_name: str,
                                membership_type: Optional[str] = None) -> Dict[str, Any]:
        body = {'email': email, 'fullName': full_name}
        if membership_type:
            body['membershipType'] = membership_type
        return self.post('/create-checkout-session', body)

    def confirm_payment(self, session_id: str, email: str, full_name: str,
                        membership_type: Optional[str] = None) -> Dict[str, Any]:
        body = {'sessionId': session_id, 'email': email, 'fullName': full_name}
        if membership_type:
            body['membershipType'] = membership_type
        return self.post('/payment-success', body)

    # ==================== MEMBER ====================

    def get_member_dashboard(self) -> Dict[str, Any]:
        return self.get('/member/dashboard', authenticated=True)

    def register_for_event(self, event_id: int) -> Dict[str, Any]:
        return self.post(f'/member/events/{event_id}/register', authenticated=True)

    def log_activity(self, activity_type: str, details: Optional[dict] = None) -> Dict[str, Any]:
        return self.post('/member/activity', {
            'activityType': activity_type,
            'details': details or {}
        }, authenticated=True)

    # ==================== ADMIN ====================

    def get_admin_stats(self) -> Dict[str, Any]:
        return self.get('/admin/stats', authenticated=True)

    def get_admin_users(self) -> Dict[str, Any]:
        return self.get('/admin/users', authenticated=True)

    def update_user_status(self, user_id: int, status: str) -> Dict[str, Any]:
        return self.put(f'/admin/users/{user_id}/status', {'status': status}, authenticated=True)

    def get_news(self) -> Dict[str, Any]:
        return self.get('/admin/news', authenticated=True)

    def create_news(self, news_data: dict) -> Dict[str, Any]:
        return self.post('/admin/news', news_data, authenticated=True)

    def update_news(self, news_id: int, news_data: dict) -> Dict[str, Any]:
        return self.put(f'/admin/news/{news_id}', news_data, authenticated=True)

    def delete_news(self, news_id: int) -> Dict[str, Any]:
        return self.delete(f'/admin/news/{news_id}', authenticated=True)

    def get_events(self) -> Dict[str, Any]:
        return self.get('/admin/events', authenticated=True)

    def create_event(self, event_data: dict) -> Dict[str, Any]:
        return self.post('/admin/events', event_data, authenticated=True)

    def update_event(self, event_id: int, event_data: dict) -> Dict[str, Any]:
        return self.put(f'/admin/events/{event_id}', event_data, authenticated=True)

    def delete_event(self, event_id: int) -> Dict[str, Any]:
        return self.delete(f'/admin/events/{event_id}', authenticated=True)
