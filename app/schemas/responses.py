"""
Response envelopes, one per endpoint.

Envelope keys are camelCase on the wire (upcomingEvents, sessionId, ...);
embedded records keep their column names.
"""
from typing import List, Optional
from flask import jsonify
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from .records import (
    ActivityRecord,
    AdminMemberRecord,
    EventRecord,
    EventRegistrationRecord,
    MemberRecord,
    MembershipRecord,
    NewsRecord,
    SessionRecord,
)


class Envelope(BaseModel):
    """Base for every JSON body the API returns."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SuccessEnvelope(Envelope):
    success: bool = True


class MessageResponse(SuccessEnvelope):
    message: str


# ==================== Auth ====================

class RegisterResponse(MessageResponse):
    user: MemberRecord


class LoginResponse(MessageResponse):
    user: MemberRecord
    profile: MemberRecord
    session: SessionRecord


class UserResponse(SuccessEnvelope):
    user: MemberRecord


# ==================== Payments ====================

class CheckoutSessionResponse(SuccessEnvelope):
    session_id: str
    url: Optional[str] = None


class PaymentSuccessResponse(MessageResponse):
    user: MemberRecord
    membership: Optional[MembershipRecord] = None
    password: Optional[str] = None
    already_processed: bool = False


class ConfigResponse(Envelope):
    publishable_key: Optional[str] = None


# ==================== Member dashboard ====================

class DashboardStats(Envelope):
    events_attended: int
    total_events: int
    total_news: int


class DashboardResponse(SuccessEnvelope):
    profile: MemberRecord
    membership: Optional[MembershipRecord] = None
    stats: DashboardStats
    upcoming_events: List[EventRecord] = []
    recent_news: List[NewsRecord] = []
    event_registrations: List[EventRegistrationRecord] = []
    user_activities: List[ActivityRecord] = []


class EventRegistrationResponse(MessageResponse):
    registration: EventRegistrationRecord


class ActivityResponse(SuccessEnvelope):
    activity: ActivityRecord


# ==================== Admin ====================

class AdminStats(Envelope):
    total_members: int
    total_news: int
    upcoming_events: int
    total_revenue: float


class AdminStatsResponse(SuccessEnvelope):
    stats: AdminStats


class UserListResponse(SuccessEnvelope):
    users: List[AdminMemberRecord] = []


class UserStatusResponse(MessageResponse):
    user: MemberRecord


class NewsListResponse(SuccessEnvelope):
    news: List[NewsRecord] = []


class NewsResponse(MessageResponse):
    news: NewsRecord


class EventListResponse(SuccessEnvelope):
    events: List[EventRecord] = []


class EventResponse(MessageResponse):
    event: EventRecord


# ==================== Webhooks ====================

class WebhookAck(Envelope):
    received: bool = True


def respond(body: Envelope, status_code: int = 200):
    """Serialize a validated envelope for Flask."""
    return jsonify(body.model_dump(mode='json', by_alias=True)), status_code
