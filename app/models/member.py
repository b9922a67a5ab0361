"""
Member and Membership models.
"""
import secrets
import string
import time
from datetime import datetime
from decimal import Decimal
from ..extensions import db

MEMBERSHIP_STATUSES = ('pending', 'active', 'inactive', 'suspended')
PAYMENT_STATUSES = ('completed', 'pending', 'failed')


class Member(db.Model):
    """
    A registered participant.
    Linked to an identity-store account through auth_user_id.
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    auth_user_id = db.Column(db.String(64), nullable=False, unique=True, index=True)

    # Member identification - MEMBER_<millis>_<random>
    member_id = db.Column(db.String(40), nullable=False, unique=True)

    # Contact info
    email = db.Column(db.String(255), nullable=False, unique=True, index=True)
    full_name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(50))
    date_of_birth = db.Column(db.String(20))

    # Address
    address = db.Column(db.String(255))
    city = db.Column(db.String(100))
    province = db.Column(db.String(100))
    postal_code = db.Column(db.String(20))

    # Profile
    occupation = db.Column(db.String(100))
    education_level = db.Column(db.String(100))
    contact_preference = db.Column(db.String(20))

    # Membership status
    membership_status = db.Column(db.String(20), nullable=False, default='pending')  # pending, active, inactive, suspended
    role = db.Column(db.String(20), nullable=False, default='member')  # member, admin

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, onupdate=datetime.utcnow)

    # Relationships
    memberships = db.relationship('Membership', backref='member', lazy='dynamic',
                                  order_by='Membership.id.desc()')
    event_registrations = db.relationship('EventRegistration', backref='member', lazy='dynamic')
    activities = db.relationship('UserActivity', backref='member', lazy='dynamic')

    def __repr__(self):
        return f'<Member {self.member_id}>'

    @staticmethod
    def generate_member_id() -> str:
        """
        Generate a fresh member ID.

        Format: MEMBER_<epoch milliseconds>_<9 lowercase alphanumerics>
        """
        alphabet = string.ascii_lowercase + string.digits
        suffix = ''.join(secrets.choice(alphabet) for _ in range(9))
        return f'MEMBER_{int(time.time() * 1000)}_{suffix}'

    @property
    def is_admin(self) -> bool:
        return self.role == 'admin'

    def latest_membership(self):
        return self.memberships.first()

    def to_dict(self, include_memberships=False):
        data = {
            'id': self.id,
            'auth_user_id': self.auth_user_id,
            'member_id': self.member_id,
            'email': self.email,
            'full_name': self.full_name,
            'phone': self.phone,
            'date_of_birth': self.date_of_birth,
            'address': self.address,
            'city': self.city,
            'province': self.province,
            'postal_code': self.postal_code,
            'occupation': self.occupation,
            'education_level': self.education_level,
            'contact_preference': self.contact_preference,
            'membership_status': self.membership_status,
            'role': self.role,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

        if include_memberships:
            data['memberships'] = [
                {
                    'membership_type': m.membership_type,
                    'payment_status': m.payment_status,
                    'amount': float(m.amount),
                    'currency': m.currency,
                }
                for m in self.memberships
            ]

        return data


class Membership(db.Model):
    """
    Financial record of a completed membership payment.
    At most one row per Stripe checkout session.
    """
    __tablename__ = 'memberships'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    membership_type = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0'))
    currency = db.Column(db.String(3), nullable=False)
    payment_status = db.Column(db.String(20), nullable=False, default='pending')  # completed, pending, failed
    payment_date = db.Column(db.DateTime)

    # Stripe integration
    stripe_session_id = db.Column(db.String(255))  # cs_xxxxx

    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint('stripe_session_id', name='uq_memberships_stripe_session_id'),
    )

    def __repr__(self):
        return f'<Membership {self.stripe_session_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'membership_type': self.membership_type,
            'amount': float(self.amount),
            'currency': self.currency,
            'payment_status': self.payment_status,
            'payment_date': self.payment_date.isoformat() if self.payment_date else None,
            'stripe_session_id': self.stripe_session_id,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
