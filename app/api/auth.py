"""
Authentication API endpoints.
Handles member registration, login, logout and the current-user lookup.
"""
import logging
from flask import Blueprint, request, g

from ..middleware.auth import require_auth
from ..models import Member
from ..schemas import (
    LoginResponse,
    MemberRecord,
    MessageResponse,
    RegisterResponse,
    SessionRecord,
    UserResponse,
    respond,
)
from ..services.identity_store import IdentityStoreError, get_identity_store
from ..services.membership_service import MembershipService
from ..utils.exceptions import UnauthorizedError, UpstreamError
from ..utils.validation import require_fields

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


def current_member() -> Member:
    """Profile row of the authenticated caller."""
    member = g.auth.member
    if not member:
        logger.error(f'No profile for auth user {g.auth.user.id}')
        raise UpstreamError('Failed to fetch user profile')
    return member


@auth_bp.route('/register', methods=['POST'])
def register():
    """
    Register a new member.

    Request body:
        email: string (required)
        password: string (required)
        fullName: string (required)
        phone, dateOfBirth, address, city, province, postalCode,
        occupation, educationLevel, contactPreference: string (optional)

    Returns:
        201 with the member profile (membership_status 'pending')
    """
    data = request.get_json(silent=True) or {}
    member = MembershipService().register_member(data)

    return respond(RegisterResponse(
        message='User registered successfully',
        user=MemberRecord.model_validate(member.to_dict())
    ), 201)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Login with email and password.

    Request body:
        email: string (required)
        password: string (required)

    Returns:
        Member profile and identity-store session
    """
    data = request.get_json(silent=True) or {}
    require_fields(data, ['email', 'password'])

    try:
        user, session = get_identity_store().sign_in_with_password(data['email'], data['password'])
    except IdentityStoreError as e:
        logger.info(f'Login rejected: {e.message}')
        raise UnauthorizedError('Invalid credentials')

    member = Member.query.filter_by(auth_user_id=user.id).first()
    if not member:
        logger.error(f'No profile for auth user {user.id}')
        raise UpstreamError('Failed to fetch user profile')

    profile = MemberRecord.model_validate(member.to_dict())
    return respond(LoginResponse(
        message='Login successful',
        user=profile,
        profile=profile,
        session=SessionRecord.model_validate(session.to_dict())
    ))


@auth_bp.route('/logout', methods=['POST'])
@require_auth
def logout():
    """Revoke the caller's identity-store session."""
    try:
        get_identity_store().sign_out(g.auth.access_token)
    except IdentityStoreError as e:
        raise UpstreamError('Logout failed', e)

    return respond(MessageResponse(message='Logout successful'))


@auth_bp.route('/user', methods=['GET'])
@require_auth
def get_user():
    """Get the authenticated member's profile."""
    member = current_member()
    return respond(UserResponse(user=MemberRecord.model_validate(member.to_dict())))
