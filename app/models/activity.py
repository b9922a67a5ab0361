"""
UserActivity model - append-only log of member actions.
"""
from datetime import datetime
from ..extensions import db


class UserActivity(db.Model):
    """
    One logged member action (login, event registration, page action).
    Rows are never updated or deleted.
    """
    __tablename__ = 'user_activities'

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    activity_type = db.Column(db.String(50), nullable=False)
    details = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    def __repr__(self):
        return f'<UserActivity {self.activity_type} user={self.user_id}>'

    @classmethod
    def log(cls, member, activity_type: str, details: dict = None) -> 'UserActivity':
        """Add an activity row to the session. Caller commits."""
        activity = cls(
            user_id=member.id,
            activity_type=activity_type,
            details=details or {}
        )
        db.session.add(activity)
        return activity

    def to_dict(self):
        return {
            'id': self.id,
            'user_id': self.user_id,
            'activity_type': self.activity_type,
            'details': self.details or {},
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
