"""
Admin API routes for the Anamola dashboard.
Handles platform stats, member administration, and news/event management.

Authentication:
- Bearer token resolved through the identity store
- The caller's member row must have role 'admin'
"""
import logging
from datetime import datetime
from flask import Blueprint, request, g
from sqlalchemy import func

from ..extensions import db
from ..middleware.auth import require_admin
from ..models import (
    Event,
    EventRegistration,
    Member,
    Membership,
    NewsArticle,
    EVENT_STATUSES,
    NEWS_STATUSES,
)
from ..schemas import (
    AdminMemberRecord,
    AdminStats,
    AdminStatsResponse,
    EventListResponse,
    EventRecord,
    EventResponse,
    MemberRecord,
    MessageResponse,
    NewsListResponse,
    NewsRecord,
    NewsResponse,
    UserListResponse,
    UserStatusResponse,
    UserResponse,
    respond,
)
from ..services.membership_service import MembershipService
from ..utils.exceptions import InvalidRequestError, NotFoundError
from ..utils.validation import parse_bool, parse_datetime, require_fields

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)

NEWS_REQUIRED_FIELDS = ['title', 'content']
EVENT_REQUIRED_FIELDS = ['title', 'description', 'start_date', 'end_date', 'location']


# ================== Dashboard ==================

@admin_bp.route('/verify', methods=['GET'])
@require_admin
def verify_admin():
    """Confirm the caller is an admin (used by the dashboard on load)."""
    return respond(UserResponse(user=MemberRecord.model_validate(g.auth.member.to_dict())))


@admin_bp.route('/stats', methods=['GET'])
@require_admin
def get_stats():
    """
    Get admin dashboard statistics.

    Revenue sums completed memberships only. Upcoming events are those
    starting today or later.
    """
    today = datetime.utcnow().replace(hour=0, minute=0, second=0, microsecond=0)

    total_members = Member.query.count()
    total_news = NewsArticle.query.count()
    upcoming_events = Event.query.filter(Event.start_date >= today).count()

    total_revenue = db.session.query(
        func.coalesce(func.sum(Membership.amount), 0)
    ).filter(Membership.payment_status == 'completed').scalar()

    return respond(AdminStatsResponse(stats=AdminStats(
        total_members=total_members,
        total_news=total_news,
        upcoming_events=upcoming_events,
        total_revenue=float(total_revenue or 0)
    )))


# ================== Members ==================

@admin_bp.route('/users', methods=['GET'])
@require_admin
def list_users():
    """List all members, newest first, with their membership payments."""
    members = Member.query.order_by(Member.created_at.desc(), Member.id.desc()).all()

    return respond(UserListResponse(users=[
        AdminMemberRecord.model_validate(m.to_dict(include_memberships=True))
        for m in members
    ]))


@admin_bp.route('/users/<int:user_id>/status', methods=['PUT'])
@require_admin
def update_user_status(user_id):
    """
    Set a member's membership status.

    Request body:
        status: pending | active | inactive | suspended
    """
    data = request.get_json(silent=True) or {}
    require_fields(data, ['status'])

    member = Member.query.get(user_id)
    if not member:
        raise NotFoundError('User', user_id)

    MembershipService.update_status(member, data['status'])
    logger.info(f'Admin {g.auth.member.member_id} set {member.member_id} to {member.membership_status}')

    return respond(UserStatusResponse(
        message='User status updated successfully',
        user=MemberRecord.model_validate(member.to_dict())
    ))


# ================== News ==================

def _news_status(data, default=None):
    status = data.get('status') or default
    if status is not None and status not in NEWS_STATUSES:
        raise InvalidRequestError(f"Invalid status. Must be one of: {', '.join(NEWS_STATUSES)}")
    return status


def _news_image_key(data):
    """image_url as stored and returned; imageUrl accepted as an alias."""
    if 'image_url' in data:
        return 'image_url'
    if 'imageUrl' in data:
        return 'imageUrl'
    return None


def _get_news_or_404(news_id) -> NewsArticle:
    article = NewsArticle.query.get(news_id)
    if not article:
        raise NotFoundError('News article', news_id)
    return article


@admin_bp.route('/news', methods=['GET'])
@require_admin
def list_news():
    """List all news articles, newest first."""
    articles = NewsArticle.query.order_by(
        NewsArticle.created_at.desc(), NewsArticle.id.desc()
    ).all()
    return respond(NewsListResponse(news=[NewsRecord.model_validate(a.to_dict()) for a in articles]))


@admin_bp.route('/news', methods=['POST'])
@require_admin
def create_news():
    """
    Create a news article.

    Request body:
        title: string (required)
        content: string (required)
        excerpt, image_url: string (optional, imageUrl also accepted)
        status: draft | published | archived (default draft)
        featured: bool (optional)
    """
    data = request.get_json(silent=True) or {}
    require_fields(data, NEWS_REQUIRED_FIELDS)
    image_key = _news_image_key(data)

    article = NewsArticle(
        title=data['title'],
        content=data['content'],
        excerpt=data.get('excerpt'),
        image_url=data[image_key] if image_key else None,
        status=_news_status(data, default='draft'),
        featured=parse_bool(data.get('featured', False), 'featured')
    )
    db.session.add(article)
    db.session.commit()

    logger.info(f'News article {article.id} created by {g.auth.member.member_id}')
    return respond(NewsResponse(
        message='News article created successfully',
        news=NewsRecord.model_validate(article.to_dict())
    ), 201)


@admin_bp.route('/news/<int:news_id>', methods=['PUT'])
@require_admin
def update_news(news_id):
    """Update a news article. title and content are required."""
    data = request.get_json(silent=True) or {}
    require_fields(data, NEWS_REQUIRED_FIELDS)
    article = _get_news_or_404(news_id)
    status = _news_status(data)
    featured = parse_bool(data['featured'], 'featured') if 'featured' in data else None

    article.title = data['title']
    article.content = data['content']
    if status:
        article.status = status
    if 'excerpt' in data:
        article.excerpt = data['excerpt']
    image_key = _news_image_key(data)
    if image_key:
        article.image_url = data[image_key]
    if featured is not None:
        article.featured = featured
    article.updated_at = datetime.utcnow()
    db.session.commit()

    return respond(NewsResponse(
        message='News article updated successfully',
        news=NewsRecord.model_validate(article.to_dict())
    ))


@admin_bp.route('/news/<int:news_id>', methods=['DELETE'])
@require_admin
def delete_news(news_id):
    """Delete a news article."""
    article = _get_news_or_404(news_id)
    db.session.delete(article)
    db.session.commit()

    logger.info(f'News article {news_id} deleted by {g.auth.member.member_id}')
    return respond(MessageResponse(message='News article deleted successfully'))


# ================== Events ==================

def _get_event_or_404(event_id) -> Event:
    event = Event.query.get(event_id)
    if not event:
        raise NotFoundError('Event', event_id)
    return event


def _apply_event_fields(event: Event, data: dict) -> None:
    """Copy validated request fields onto an event."""
    start_date = parse_datetime(data['start_date'], 'start_date')
    end_date = parse_datetime(data['end_date'], 'end_date')
    if end_date < start_date:
        raise InvalidRequestError('end_date must not be before start_date')

    status = data.get('status')
    if status is not None and status not in EVENT_STATUSES:
        raise InvalidRequestError(f"Invalid status. Must be one of: {', '.join(EVENT_STATUSES)}")

    max_participants = data.get('max_participants')
    if max_participants not in (None, ''):
        try:
            max_participants = int(max_participants)
        except (TypeError, ValueError):
            raise InvalidRequestError('max_participants must be a number')
        if max_participants < 1:
            raise InvalidRequestError('max_participants must be positive')
    else:
        max_participants = None

    registration_deadline = parse_datetime(
        data.get('registration_deadline'), 'registration_deadline'
    )
    flags = {
        name: parse_bool(data[name], name)
        for name in ('registration_required', 'featured') if name in data
    }

    event.title = data['title']
    event.description = data['description']
    event.location = data['location']
    event.start_date = start_date
    event.end_date = end_date
    if status:
        event.status = status

    if 'short_description' in data:
        event.short_description = data['short_description']
    if 'image_url' in data:
        event.image_url = data['image_url']
    if 'location_details' in data:
        event.location_details = data['location_details']
    if 'max_participants' in data:
        event.max_participants = max_participants
    if 'registration_deadline' in data:
        event.registration_deadline = registration_deadline
    for name, value in flags.items():
        setattr(event, name, value)


@admin_bp.route('/events', methods=['GET'])
@require_admin
def list_events():
    """List all events by start date."""
    events = Event.query.order_by(Event.start_date.asc()).all()
    return respond(EventListResponse(events=[EventRecord.model_validate(e.to_dict()) for e in events]))


@admin_bp.route('/events', methods=['POST'])
@require_admin
def create_event():
    """
    Create an event.

    Request body:
        title, description, location: string (required)
        start_date, end_date: ISO-8601 datetime (required)
        status: upcoming | ongoing | completed | cancelled (default upcoming)
        short_description, image_url, location_details, max_participants,
        registration_required, registration_deadline, featured (optional)
    """
    data = request.get_json(silent=True) or {}
    require_fields(data, EVENT_REQUIRED_FIELDS)

    event = Event(status='upcoming', registration_required=False, featured=False)
    _apply_event_fields(event, data)
    db.session.add(event)
    db.session.commit()

    logger.info(f'Event {event.id} created by {g.auth.member.member_id}')
    return respond(EventResponse(
        message='Event created successfully',
        event=EventRecord.model_validate(event.to_dict())
    ), 201)


@admin_bp.route('/events/<int:event_id>', methods=['PUT'])
@require_admin
def update_event(event_id):
    """Update an event. The create-time required fields are required here too."""
    data = request.get_json(silent=True) or {}
    require_fields(data, EVENT_REQUIRED_FIELDS)
    event = _get_event_or_404(event_id)

    _apply_event_fields(event, data)
    event.updated_at = datetime.utcnow()
    db.session.commit()

    return respond(EventResponse(
        message='Event updated successfully',
        event=EventRecord.model_validate(event.to_dict())
    ))


@admin_bp.route('/events/<int:event_id>', methods=['DELETE'])
@require_admin
def delete_event(event_id):
    """Delete an event and its registrations."""
    event = _get_event_or_404(event_id)
    EventRegistration.query.filter_by(event_id=event.id).delete()
    db.session.delete(event)
    db.session.commit()

    logger.info(f'Event {event_id} deleted by {g.auth.member.member_id}')
    return respond(MessageResponse(message='Event deleted successfully'))
