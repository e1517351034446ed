from enum import Enum


class UserRole(str, Enum):
    Admin = "admin"
    Staff = "staff"
    User = "user"


class EnquiryStatus(str, Enum):
    New = "new"
    InProgress = "in_progress"
    Closed = "closed"
