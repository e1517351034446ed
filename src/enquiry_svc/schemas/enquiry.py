from __future__ import annotations

from datetime import datetime
from typing import Optional, List

from pydantic import AliasChoices, BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel

from enquiry_svc import config
from enquiry_svc.models.enums import EnquiryStatus, UserRole


class CamelModel(BaseModel):
    """Base for payloads exchanged in camelCase with the dashboard."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EnquiryCreate(CamelModel):
    customer_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=20)
    message: str = Field(..., min_length=1, max_length=1000)

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    @field_validator("email")
    @classmethod
    def _lower_email(cls, value: str) -> str:
        return str(value).strip().lower()


class EnquiryUpdate(CamelModel):
    """Payload for partial update of an Enquiry.

    Handlers use exclude_unset so an explicit ``assignedTo: null`` is
    distinguishable from an absent field. Unknown fields are rejected.
    """

    status: Optional[EnquiryStatus] = None
    assigned_to: Optional[int] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class AssignRequest(CamelModel):
    assigned_to: int

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")


class AssigneeSummary(CamelModel):
    id: int
    name: str
    email: str

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class StaffMember(AssigneeSummary):
    role: UserRole


class StaffListResponse(BaseModel):
    staff: List[StaffMember]


class EnquiryResponse(CamelModel):
    id: int
    customer_name: str
    email: str
    phone: str
    message: str
    status: EnquiryStatus
    # read from the ORM relationship, emitted as the resolved assignee
    assigned_to: Optional[AssigneeSummary] = Field(
        default=None,
        validation_alias=AliasChoices("assignee", "assignedTo"),
        serialization_alias="assignedTo",
    )
    is_deleted: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class Pagination(BaseModel):
    current: int
    pages: int
    total: int


class EnquiryListResponse(BaseModel):
    enquiries: List[EnquiryResponse]
    pagination: Pagination


class EnquiryQuery(BaseModel):
    """Typed list filter parsed once from the query string."""

    status: Optional[EnquiryStatus] = None
    search: Optional[str] = Field(default=None, max_length=200)
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=config.DEFAULT_PAGE_SIZE, ge=1, le=config.MAX_PAGE_SIZE)

    @field_validator("status", "search", mode="before")
    @classmethod
    def _blank_as_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class MessageResponse(BaseModel):
    message: str
