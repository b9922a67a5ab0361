"""
News, Event and EventRegistration models.
Content managed from the admin dashboard.
"""
from datetime import datetime
from ..extensions import db

NEWS_STATUSES = ('draft', 'published', 'archived')
EVENT_STATUSES = ('upcoming', 'ongoing', 'completed', 'cancelled')


def _iso(value):
    return value.isoformat() if value else None


class NewsArticle(db.Model):
    """A news article. Only admins create, edit or delete these."""
    __tablename__ = 'news'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    content = db.Column(db.Text, nullable=False)
    excerpt = db.Column(db.String(500))
    image_url = db.Column(db.String(500))
    status = db.Column(db.String(20), nullable=False, default='draft')  # draft, published, archived
    featured = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime)

    def __repr__(self):
        return f'<NewsArticle {self.id}: {self.title}>'

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'excerpt': self.excerpt,
            'image_url': self.image_url,
            'status': self.status,
            'featured': self.featured,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class Event(db.Model):
    """A party event (rally, meeting, campaign day)."""
    __tablename__ = 'events'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=False)
    short_description = db.Column(db.String(500))
    image_url = db.Column(db.String(500))

    start_date = db.Column(db.DateTime, nullable=False, index=True)
    end_date = db.Column(db.DateTime, nullable=False)
    location = db.Column(db.String(255), nullable=False)
    location_details = db.Column(db.String(500))

    max_participants = db.Column(db.Integer)
    registration_required = db.Column(db.Boolean, nullable=False, default=False)
    registration_deadline = db.Column(db.DateTime)

    status = db.Column(db.String(20), nullable=False, default='upcoming')  # upcoming, ongoing, completed, cancelled
    featured = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime)

    registrations = db.relationship('EventRegistration', backref='event', lazy='dynamic',
                                    cascade='all, delete-orphan')

    def __repr__(self):
        return f'<Event {self.id}: {self.title}>'

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'short_description': self.short_description,
            'image_url': self.image_url,
            'start_date': _iso(self.start_date),
            'end_date': _iso(self.end_date),
            'location': self.location,
            'location_details': self.location_details,
            'max_participants': self.max_participants,
            'registration_required': self.registration_required,
            'registration_deadline': _iso(self.registration_deadline),
            'status': self.status,
            'featured': self.featured,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }


class EventRegistration(db.Model):
    """
    A member's registration for an event.

    No uniqueness on (user_id, event_id): whether a member may register
    twice is an open product question, so every registration is recorded.
    """
    __tablename__ = 'event_registrations'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    event_id = db.Column(db.Integer, db.ForeignKey('events.id'), nullable=False, index=True)
    status = db.Column(db.String(20), nullable=False, default='registered')
    registration_date = db.Column(db.DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f'<EventRegistration user={self.user_id} event={self.event_id}>'

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'event_id': self.event_id,
            'status': self.status,
            'registration_date': _iso(self.registration_date),
        }
