"""
Typed request/response contracts for the Anamola API.
"""
from .records import (
    ActivityRecord,
    AdminMemberRecord,
    EventRecord,
    EventRegistrationRecord,
    MemberRecord,
    MembershipRecord,
    MembershipSummary,
    NewsRecord,
    SessionRecord,
)
from .responses import (
    ActivityResponse,
    AdminStats,
    AdminStatsResponse,
    CheckoutSessionResponse,
    ConfigResponse,
    DashboardResponse,
    DashboardStats,
    EventListResponse,
    EventRegistrationResponse,
    EventResponse,
    LoginResponse,
    MessageResponse,
    NewsListResponse,
    NewsResponse,
    PaymentSuccessResponse,
    RegisterResponse,
    UserListResponse,
    UserResponse,
    UserStatusResponse,
    WebhookAck,
    respond,
)
