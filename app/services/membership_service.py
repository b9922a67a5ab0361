"""
Membership service: registration and payment-driven activation.

Activation turns a paid Stripe checkout session into an identity-store
account, an active Member and exactly one Membership record per session.
"""
import logging
import secrets
import string
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Tuple

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ..extensions import db
from ..models import Member, Membership, MEMBERSHIP_STATUSES
from ..utils.exceptions import (
    AccountCreationError,
    DuplicateError,
    InvalidRequestError,
    PaymentIncompleteError,
    UpstreamError,
)
from ..utils.validation import require_fields, require_valid_email
from .identity_store import IdentityStoreError, get_identity_store
from .stripe_service import StripeService

logger = logging.getLogger(__name__)

ONE_TIME_PASSWORD_LENGTH = 12

# Optional profile fields accepted at registration (request key -> column)
PROFILE_FIELDS = {
    'phone': 'phone',
    'dateOfBirth': 'date_of_birth',
    'address': 'address',
    'city': 'city',
    'province': 'province',
    'postalCode': 'postal_code',
    'occupation': 'occupation',
    'educationLevel': 'education_level',
    'contactPreference': 'contact_preference',
}


def generate_one_time_password(length: int = ONE_TIME_PASSWORD_LENGTH) -> str:
    """Random letters and digits from the secrets module."""
    characters = string.ascii_letters + string.digits
    return ''.join(secrets.choice(characters) for _ in range(length))


@dataclass
class ActivationResult:
    """Outcome of activating a membership from a checkout session."""
    member: Member
    membership: Optional[Membership]
    generated_password: Optional[str]
    already_processed: bool = False


class MembershipService:
    """Service for membership operations."""

    def __init__(self, identity_store=None, stripe_service: Optional[StripeService] = None):
        self.identity_store = identity_store or get_identity_store()
        self.stripe_service = stripe_service or StripeService()

    # ==================== REGISTRATION ====================

    def register_member(self, data: dict) -> Member:
        """
        Register a member who chose their own password.

        The member starts as 'pending' until a payment activates them.

        Raises:
            MissingFieldsError: If email, password or fullName is absent
            InvalidRequestError: If the email is malformed
            DuplicateError: If a member with this email exists
            AccountCreationError: If the identity store refuses the account
            UpstreamError: If the profile row cannot be written
        """
        require_fields(data, ['email', 'password', 'fullName'])
        email = str(data['email']).strip()
        require_valid_email(email)

        if Member.query.filter_by(email=email).first():
            raise DuplicateError('User already exists')

        try:
            auth_user = self.identity_store.sign_up(email, data['password'], data['fullName'])
        except IdentityStoreError as e:
            logger.error(f'Auth creation error for {email}: {e.message}')
            raise AccountCreationError(e)

        member = Member(
            auth_user_id=auth_user.id,
            email=email,
            full_name=data['fullName'],
            member_id=Member.generate_member_id(),
            membership_status='pending'
        )
        for key, column in PROFILE_FIELDS.items():
            if data.get(key):
                setattr(member, column, data[key])

        self._save_member(member)
        logger.info(f'Registered member {member.member_id}')
        return member

    # ==================== ACTIVATION ====================

    def activate_from_payment(
        self,
        session_id: str,
        email: str,
        full_name: str,
        membership_type: Optional[str] = None
    ) -> ActivationResult:
        """
        Provision an account and membership for a paid checkout session.

        Steps:
            1. validate input
            2. verify the session is paid (no side effects otherwise)
            3. return the existing pair if this session was already processed
            4-5. create the identity with a generated password
            6. write the active Member
            7. write the Membership record (failure is logged, not raised)

        Raises:
            MissingFieldsError: If sessionId, email or fullName is absent
            PaymentIncompleteError: If Stripe does not report the session paid
            AccountCreationError: If the identity store refuses the account
            UpstreamError: If Stripe or the member insert fails
        """
        require_fields(
            {'sessionId': session_id, 'email': email, 'fullName': full_name},
            ['sessionId', 'email', 'fullName']
        )

        session = self.stripe_service.retrieve_session(session_id)
        payment_status = session.get('payment_status')
        if payment_status != 'paid':
            logger.info(f'Session {session_id} not paid (payment_status={payment_status})')
            raise PaymentIncompleteError(payment_status)

        email, full_name, membership_type = self._resolve_payer(
            session, email, full_name, membership_type
        )

        existing = Membership.query.filter_by(stripe_session_id=session_id).first()
        if existing:
            logger.info(f'Session {session_id} already activated member {existing.member.member_id}')
            return ActivationResult(
                member=existing.member,
                membership=existing,
                generated_password=None,
                already_processed=True
            )

        member_id = Member.generate_member_id()
        password = generate_one_time_password()

        try:
            auth_user = self.identity_store.sign_up(email, password, full_name)
        except IdentityStoreError as e:
            logger.error(f'Auth creation error for {email}: {e.message}')
            raise AccountCreationError(e)

        member = Member(
            auth_user_id=auth_user.id,
            email=email,
            full_name=full_name,
            member_id=member_id,
            membership_status='active'
        )
        self._save_member(member)

        membership, winner = self._record_membership(member, session_id, membership_type)
        if winner is not None:
            # A concurrent request for the same session committed first
            logger.warning(
                f'Session {session_id} was activated concurrently; member {member.member_id} '
                f'needs operator review'
            )
            return ActivationResult(
                member=winner.member,
                membership=winner,
                generated_password=None,
                already_processed=True
            )

        logger.info(f'Activated member {member.member_id} from session {session_id}')
        return ActivationResult(member=member, membership=membership, generated_password=password)

    def _resolve_payer(
        self,
        session,
        email: str,
        full_name: str,
        membership_type: Optional[str]
    ) -> Tuple[str, str, str]:
        """
        Prefer payer details recorded on the Stripe session over the request body.
        """
        metadata = session.get('metadata') or {}
        session_email = session.get('customer_email') or metadata.get('email')

        if session_email and session_email.lower() != email.strip().lower():
            logger.warning(
                f"Payment confirmation email mismatch for session {session.get('id')}; "
                f'using the email recorded on the session'
            )

        resolved_type = (
            metadata.get('membershipType')
            or membership_type
            or current_app.config['DEFAULT_MEMBERSHIP_TYPE']
        )
        return (
            (session_email or email).strip(),
            metadata.get('fullName') or full_name,
            resolved_type
        )

    def _record_membership(
        self,
        member: Member,
        session_id: str,
        membership_type: str
    ) -> Tuple[Optional[Membership], Optional[Membership]]:
        """
        Insert the membership record for a freshly activated member.

        Returns:
            (membership, None) on success, (None, None) if the write failed,
            (None, existing) if another request already recorded this session
        """
        membership = Membership(
            user_id=member.id,
            membership_type=membership_type,
            amount=Decimal(str(current_app.config['MEMBERSHIP_AMOUNT'])),
            currency=current_app.config['MEMBERSHIP_CURRENCY'].upper(),
            payment_status='completed',
            payment_date=datetime.utcnow(),
            stripe_session_id=session_id
        )
        db.session.add(membership)

        try:
            db.session.commit()
            return membership, None
        except IntegrityError as e:
            db.session.rollback()
            existing = Membership.query.filter_by(stripe_session_id=session_id).first()
            if existing:
                return None, existing
            logger.error(f'Membership creation error for {member.member_id}: {e}')
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Membership creation error for {member.member_id}: {e}')

        return None, None

    def _save_member(self, member: Member) -> None:
        db.session.add(member)
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            logger.error(f'Profile creation error for {member.email}: {e}')
            raise UpstreamError('Failed to create user profile', e)

    # ==================== ADMINISTRATION ====================

    @staticmethod
    def update_status(member: Member, status: str) -> Member:
        """
        Change a member's membership status.

        Raises:
            InvalidRequestError: If status is not a known membership status
        """
        if status not in MEMBERSHIP_STATUSES:
            raise InvalidRequestError(
                f"Invalid status. Must be one of: {', '.join(MEMBERSHIP_STATUSES)}"
            )

        member.membership_status = status
        db.session.commit()
        logger.info(f'Member {member.member_id} status set to {status}')
        return member
