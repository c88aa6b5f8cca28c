# QuickJob - Models Package

from src.models.account import Account, AccountRole
from src.models.credential import Credential
from src.models.verification import VerificationRecord, ReviewStatus, VerificationStep
from src.models.conversation import Conversation, ConversationSide, Side
from src.models.message import Message
from src.models.notification import Notification, NotificationTab
from src.models.booking_request import BookingRequest, RequestStatus
from src.models.profile import Profile, ProfileImage
from src.models.rating import Rating

__all__ = [
    "Account",
    "AccountRole",
    "Credential",
    "VerificationRecord",
    "ReviewStatus",
    "VerificationStep",
    "Conversation",
    "ConversationSide",
    "Side",
    "Message",
    "Notification",
    "NotificationTab",
    "BookingRequest",
    "RequestStatus",
    "Profile",
    "ProfileImage",
    "Rating",
]
