"""
Bearer-token authentication middleware.

Resolves the Authorization header through the identity store and
attaches an explicit AuthContext to the request as g.auth.
"""
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Optional

from flask import request, g

from ..models import Member
from ..services.identity_store import AuthUser, IdentityStoreError, get_identity_store
from ..utils.errors import ErrorCode
from ..utils.exceptions import ForbiddenError, UnauthorizedError

logger = logging.getLogger(__name__)


@dataclass
class AuthContext:
    """Who is calling: identity-store account, its token, and profile row."""
    user: AuthUser
    access_token: str
    member: Optional[Member] = None


def get_bearer_token() -> Optional[str]:
    """Extract the token from an 'Authorization: Bearer <token>' header."""
    auth_header = request.headers.get('Authorization', '')
    if not auth_header.startswith('Bearer '):
        return None
    token = auth_header[len('Bearer '):].strip()
    return token or None


def authenticate_request() -> AuthContext:
    """
    Resolve the current request's bearer token.

    Raises:
        UnauthorizedError: If the token is missing or rejected
    """
    token = get_bearer_token()
    if not token:
        raise UnauthorizedError('Access token required')

    try:
        user = get_identity_store().get_user(token)
    except IdentityStoreError as e:
        logger.info(f'Token verification failed: {e.message}')
        raise UnauthorizedError('Invalid token', ErrorCode.INVALID_TOKEN)

    member = Member.query.filter_by(auth_user_id=user.id).first()
    return AuthContext(user=user, access_token=token, member=member)


def require_auth(f):
    """
    Decorator to require a valid bearer token.

    Sets g.auth to an AuthContext.

    Usage:
        @require_auth
        def my_endpoint():
            member = g.auth.member
            ...
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        g.auth = authenticate_request()
        return f(*args, **kwargs)

    return decorated_function


def require_admin(f):
    """
    Decorator to require a bearer token whose member has role 'admin'.

    Missing/invalid token -> 401, valid token without admin role -> 403.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        auth = authenticate_request()
        if not auth.member or not auth.member.is_admin:
            raise ForbiddenError('Admin access required')
        g.auth = auth
        return f(*args, **kwargs)

    return decorated_function
