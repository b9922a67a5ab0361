"""
Member dashboard API endpoints.
Everything a logged-in member sees about their own account.
"""
import logging
from datetime import datetime
from flask import Blueprint, request

from ..extensions import db
from ..middleware.auth import require_auth
from ..models import Event, EventRegistration, NewsArticle, UserActivity
from ..schemas import (
    ActivityRecord,
    ActivityResponse,
    DashboardResponse,
    DashboardStats,
    EventRecord,
    EventRegistrationRecord,
    EventRegistrationResponse,
    MemberRecord,
    MembershipRecord,
    NewsRecord,
    respond,
)
from ..utils.exceptions import InvalidRequestError, NotFoundError
from ..utils.validation import require_fields
from .auth import current_member

logger = logging.getLogger(__name__)

member_bp = Blueprint('member', __name__)

DASHBOARD_EVENT_LIMIT = 5
DASHBOARD_NEWS_LIMIT = 5
DASHBOARD_ACTIVITY_LIMIT = 10


@member_bp.route('/dashboard', methods=['GET'])
@require_auth
def get_dashboard():
    """
    Get the member dashboard.

    Returns:
        profile, latest membership, stats, upcomingEvents, recentNews,
        eventRegistrations and userActivities
    """
    member = current_member()
    now = datetime.utcnow()

    upcoming_events = Event.query.filter(
        Event.start_date >= now
    ).order_by(Event.start_date.asc()).limit(DASHBOARD_EVENT_LIMIT).all()

    recent_news = NewsArticle.query.order_by(
        NewsArticle.created_at.desc()
    ).limit(DASHBOARD_NEWS_LIMIT).all()

    registrations = member.event_registrations.order_by(
        EventRegistration.registration_date.desc()
    ).all()

    activities = member.activities.order_by(
        UserActivity.created_at.desc()
    ).limit(DASHBOARD_ACTIVITY_LIMIT).all()

    membership = member.latest_membership()

    return respond(DashboardResponse(
        profile=MemberRecord.model_validate(member.to_dict()),
        membership=MembershipRecord.model_validate(membership.to_dict()) if membership else None,
        stats=DashboardStats(
            events_attended=len(registrations),
            total_events=len(upcoming_events),
            total_news=len(recent_news)
        ),
        upcoming_events=[EventRecord.model_validate(e.to_dict()) for e in upcoming_events],
        recent_news=[NewsRecord.model_validate(n.to_dict()) for n in recent_news],
        event_registrations=[
            EventRegistrationRecord.model_validate(r.to_dict()) for r in registrations
        ],
        user_activities=[ActivityRecord.model_validate(a.to_dict()) for a in activities]
    ))


@member_bp.route('/events/<int:event_id>/register', methods=['POST'])
@require_auth
def register_for_event(event_id):
    """
    Register the caller for an event.

    Repeat registrations are recorded; see EventRegistration.

    Returns:
        201 with the registration
    """
    member = current_member()
    event = Event.query.get(event_id)
    if not event:
        raise NotFoundError('Event', event_id)

    if event.status == 'cancelled':
        raise InvalidRequestError('Event has been cancelled')

    if event.registration_deadline and event.registration_deadline < datetime.utcnow():
        raise InvalidRequestError('Registration deadline has passed')

    if event.max_participants is not None:
        taken = event.registrations.filter_by(status='registered').count()
        if taken >= event.max_participants:
            raise InvalidRequestError('Event is full')

    registration = EventRegistration(user_id=member.id, event_id=event.id)
    db.session.add(registration)
    UserActivity.log(member, 'event_registration', {
        'event_id': event.id,
        'event_title': event.title
    })
    db.session.commit()

    logger.info(f'Member {member.member_id} registered for event {event.id}')
    return respond(EventRegistrationResponse(
        message='Registered for event successfully',
        registration=EventRegistrationRecord.model_validate(registration.to_dict())
    ), 201)


@member_bp.route('/activity', methods=['POST'])
@require_auth
def log_activity():
    """
    Record a member action.

    Request body:
        activityType: string (required)
        details: object (optional)
    """
    member = current_member()
    data = request.get_json(silent=True) or {}
    require_fields(data, ['activityType'])

    details = data.get('details') or {}
    if not isinstance(details, dict):
        raise InvalidRequestError('details must be an object')

    activity = UserActivity.log(member, str(data['activityType']), details)
    db.session.commit()

    return respond(ActivityResponse(activity=ActivityRecord.model_validate(activity.to_dict())), 201)
