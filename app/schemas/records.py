"""
Pydantic schemas for the rows returned by the API.

Field names match the database columns; timestamps are ISO strings.
"""
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, Field


class MembershipSummary(BaseModel):
    """Membership fields embedded in the admin user list."""
    membership_type: str
    payment_status: str
    amount: float
    currency: str


class MemberRecord(BaseModel):
    """Member profile."""
    id: int
    auth_user_id: str
    member_id: str = Field(..., pattern=r'^MEMBER_\d+_[a-z0-9]{9}$')
    email: str
    full_name: str
    phone: Optional[str] = None
    date_of_birth: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    occupation: Optional[str] = None
    education_level: Optional[str] = None
    contact_preference: Optional[str] = None
    membership_status: Literal['pending', 'active', 'inactive', 'suspended']
    role: str
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class AdminMemberRecord(MemberRecord):
    """Member profile with payment history, for the admin user list."""
    memberships: List[MembershipSummary] = []


class MembershipRecord(BaseModel):
    """Completed membership payment."""
    id: int
    user_id: int
    membership_type: str
    amount: float
    currency: str
    payment_status: Literal['completed', 'pending', 'failed']
    payment_date: Optional[str] = None
    stripe_session_id: Optional[str] = None
    created_at: Optional[str] = None


class NewsRecord(BaseModel):
    id: int
    title: str
    content: str
    excerpt: Optional[str] = None
    image_url: Optional[str] = None
    status: Literal['draft', 'published', 'archived']
    featured: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class EventRecord(BaseModel):
    id: int
    title: str
    description: str
    short_description: Optional[str] = None
    image_url: Optional[str] = None
    start_date: str
    end_date: str
    location: str
    location_details: Optional[str] = None
    max_participants: Optional[int] = None
    registration_required: bool
    registration_deadline: Optional[str] = None
    status: Literal['upcoming', 'ongoing', 'completed', 'cancelled']
    featured: bool
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


class EventRegistrationRecord(BaseModel):
    id: int
    user_id: int
    event_id: int
    status: str
    registration_date: Optional[str] = None


class ActivityRecord(BaseModel):
    id: int
    user_id: int
    activity_type: str
    details: Dict[str, Any] = {}
    created_at: Optional[str] = None


class SessionRecord(BaseModel):
    """Identity-store session handed to the client at login."""
    access_token: str
    refresh_token: Optional[str] = None
    token_type: str = 'bearer'
    expires_in: Optional[int] = None
    expires_at: Optional[int] = None
