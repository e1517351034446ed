from .auth import Token, LoginRequest, RegisterRequest
from .enquiry import (
    EnquiryCreate,
    EnquiryResponse,
    EnquiryUpdate,
    EnquiryQuery,
    EnquiryListResponse,
    AssignRequest,
    AssigneeSummary,
    StaffListResponse,
    Pagination,
    MessageResponse,
)
from .user import UserCreate, UserUpdate, UserRoleUpdate, UserResponse, UserListResponse, PageQuery

__all__ = [
    "Token",
    "LoginRequest",
    "RegisterRequest",
    "EnquiryCreate",
    "EnquiryResponse",
    "EnquiryUpdate",
    "EnquiryQuery",
    "EnquiryListResponse",
    "AssignRequest",
    "AssigneeSummary",
    "StaffListResponse",
    "Pagination",
    "MessageResponse",
    "UserCreate",
    "UserUpdate",
    "UserRoleUpdate",
    "UserResponse",
    "UserListResponse",
    "PageQuery",
]
