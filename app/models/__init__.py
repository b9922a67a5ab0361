"""
Database models for the Anamola membership platform.
"""
from .member import Member, Membership, MEMBERSHIP_STATUSES, PAYMENT_STATUSES
from .content import NewsArticle, Event, EventRegistration, NEWS_STATUSES, EVENT_STATUSES
from .activity import UserActivity

__all__ = [
    'Member',
    'Membership',
    'NewsArticle',
    'Event',
    'EventRegistration',
    'UserActivity',
    'MEMBERSHIP_STATUSES',
    'PAYMENT_STATUSES',
    'NEWS_STATUSES',
    'EVENT_STATUSES',
]
