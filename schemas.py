"""
Database Schemas for the community portal

Each Pydantic model corresponds to a MongoDB collection. Collection name is the
lowercased class name.

Examples:
- User -> "user"
- Event -> "event"
- CommitteeMember -> "committeemember"

Request payloads (``*Create``, ``*Update``) live next to the collection they
write to.
"""

from typing import Any, Dict, List, Literal, Optional
from datetime import datetime
from pydantic import BaseModel, Field, field_validator

from database import utcnow

EventType = Literal["tafseer", "mahfil", "quran_class", "charity", "other"]
EventStatus = Literal["upcoming", "ongoing", "completed", "cancelled"]
DonationStatus = Literal["pending", "confirmed", "failed"]
DonationMethod = Literal["bkash", "nagad", "cash", "bank"]
FeeMethod = Literal["bkash", "nagad", "cash"]
FeeStatus = Literal["pending", "paid", "failed"]
MembershipStatus = Literal["pending", "approved", "rejected"]
NotificationType = Literal["info", "success", "warning", "error"]


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and v.strip() == "":
        return None
    return v


# ===== Users =====
class User(BaseModel):
    name: str = Field(..., description="Full name")
    email: Optional[str] = Field(None, description="Email address, stored lower-cased")
    phone: str = Field(..., description="Mobile number, unique")
    password: str = Field(..., description="bcrypt hash")
    role: str = Field("user", description="Access role: admin/user/advisor")
    custom_role: str = Field("", description="Display label for 'other' roles")
    membership_status: MembershipStatus = "approved"
    address: str = ""
    occupation: str = ""
    bio: str = ""
    profile_image: str = ""
    is_active: bool = Field(True, description="Active status")


class RegisterPayload(BaseModel):
    name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    email: Optional[str] = None

    @field_validator("email", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class LoginPayload(BaseModel):
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    password: Optional[str] = None
    profile_image: Optional[str] = None
    address: Optional[str] = None
    occupation: Optional[str] = None
    bio: Optional[str] = None


class UserCreate(RegisterPayload):
    role: str = "user"
    custom_role: Optional[str] = None


class RoleUpdate(BaseModel):
    role: str = Field(..., min_length=1)
    custom_role: Optional[str] = None


class MembershipUpdate(BaseModel):
    membership_status: Optional[MembershipStatus] = None
    is_active: Optional[bool] = None


# ===== Events =====
class Event(BaseModel):
    title: str = Field(..., description="Title of the event")
    slug: str = Field(..., description="Unique URL-safe identifier")
    type: EventType = "other"
    description: str = ""
    location: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: EventStatus = "upcoming"
    estimated_budget: float = Field(0, ge=0, description="Budget in currency units")
    banner_url: str = Field("", description="Public URL to banner image")
    is_public: bool = True
    manager_ids: List[str] = []
    created_by: str


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1)
    slug: Optional[str] = None
    type: EventType = "other"
    description: str = ""
    location: str = ""
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: EventStatus = "upcoming"
    estimated_budget: float = Field(0, ge=0)
    banner_url: str = ""
    is_public: bool = True
    manager_ids: List[str] = []

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class EventUpdate(BaseModel):
    title: Optional[str] = None
    slug: Optional[str] = None
    type: Optional[EventType] = None
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: Optional[EventStatus] = None
    estimated_budget: Optional[float] = Field(None, ge=0)
    banner_url: Optional[str] = None
    is_public: Optional[bool] = None
    manager_ids: Optional[List[str]] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class EventStatusUpdate(BaseModel):
    status: EventStatus


# ===== Donations =====
class Donation(BaseModel):
    user_id: Optional[str] = Field(None, description="Donor account, if logged in")
    event_id: Optional[str] = Field(None, description="Linked event id")
    donor_name: str
    donor_phone: str = ""
    amount: float = Field(..., gt=0)
    payment_method: DonationMethod
    transaction_id: str = ""
    is_anonymous: bool = False
    status: DonationStatus = "pending"
    donation_date: datetime = Field(default_factory=utcnow)


class DonationCreate(BaseModel):
    donor_name: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    payment_method: DonationMethod
    event_id: Optional[str] = None
    donor_phone: str = ""
    transaction_id: str = ""
    is_anonymous: bool = False

    @field_validator("event_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


class DonationStatusUpdate(BaseModel):
    status: DonationStatus


# ===== Fees =====
class Fee(BaseModel):
    user_id: str
    amount: float = Field(..., gt=0)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000)
    payment_method: FeeMethod
    transaction_id: str = ""
    status: FeeStatus = "paid"
    paid_at: Optional[datetime] = Field(default_factory=utcnow)


class FeeCreate(BaseModel):
    user_id: str
    amount: float = Field(..., gt=0)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000)
    payment_method: FeeMethod
    transaction_id: str = ""
    status: FeeStatus = "paid"
    paid_at: Optional[datetime] = None


# ===== Expenses =====
class Expense(BaseModel):
    title: str
    amount: float = Field(..., gt=0)
    date: datetime = Field(default_factory=utcnow)
    category: str = "Other"
    description: str = ""
    event_id: Optional[str] = None
    created_by: str


class ExpenseCreate(BaseModel):
    title: str = Field(..., min_length=1)
    amount: float = Field(..., gt=0)
    date: Optional[datetime] = None
    category: str = "Other"
    description: str = ""
    event_id: Optional[str] = None

    @field_validator("date", "event_id", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        return _blank_to_none(v)


# ===== Content =====
class CommitteeMember(BaseModel):
    name: str = Field(..., min_length=1)
    role_key: str = Field(..., min_length=1, description="e.g. president, member")
    image_url: str = ""
    phone: str = ""
    order: int = 0


class CommitteeMemberUpdate(BaseModel):
    name: Optional[str] = None
    role_key: Optional[str] = None
    image_url: Optional[str] = None
    phone: Optional[str] = None
    order: Optional[int] = None


class GalleryItem(BaseModel):
    title: str = Field(..., min_length=1)
    image_url: str = Field(..., min_length=1)
    category: str = "General"
    date: datetime = Field(default_factory=utcnow)


class SiteContent(BaseModel):
    section: str
    data: Dict[str, Any] = {}


# ===== Notifications =====
class Notification(BaseModel):
    user_id: str
    message: str
    type: NotificationType = "info"
    is_read: bool = False
