"""QuickJob - JSON request bodies"""

from typing import List, Optional

from pydantic import BaseModel, Field


# Auth
class VerifyEmailRequest(BaseModel):
    email: str
    code: str


class LoginRequest(BaseModel):
    email: str
    password: str


# Verification
class VerificationInitRequest(BaseModel):
    userId: int


class VerificationReviewRequest(BaseModel):
    """Status and step are checked by the service so bad values map to 400."""

    userId: int
    step: str
    status: str
    credentialId: Optional[int] = None


# Conversations & messages
class ConversationCreate(BaseModel):
    professional_id: int
    client_id: int


class ConversationRoleRequest(BaseModel):
    role: str


class MessageCreate(BaseModel):
    conversation_id: int
    sender_id: int
    message: str = Field(..., min_length=1)


# Notifications
class NotificationReadRequest(BaseModel):
    id: int


class NotificationReadAllRequest(BaseModel):
    userId: int


class NotificationCreate(BaseModel):
    userId: int
    message: str = Field(..., min_length=1)
    targetTab: Optional[str] = None


# Booking requests
class BookingRequestCreate(BaseModel):
    clientId: int
    professionalId: int
    service: str = Field(..., min_length=1)
    date: str
    time: str
    urgency: Optional[str] = None
    message: Optional[str] = None


class BookingStatusUpdate(BaseModel):
    requestId: int
    status: str


# Profiles
class ProfileBioUpdate(BaseModel):
    bio: str = ""


class ProfileUpdate(BaseModel):
    userId: int
    bio: Optional[str] = None
    address: Optional[str] = None
    home: Optional[str] = None
    contact: Optional[str] = None
    socialLinks: Optional[List[str]] = None


# Ratings
class RatingCreate(BaseModel):
    professionalId: int
    clientId: int
    stars: int
    comment: Optional[str] = None
