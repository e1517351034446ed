from .base import Base, get_db, init_db
from .enums import UserRole, EnquiryStatus
from .user import User
from .enquiry import Enquiry

__all__ = [
    "Base",
    "get_db",
    "init_db",
    "User",
    "Enquiry",
    "UserRole",
    "EnquiryStatus",
]
