from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from enquiry_svc.models import User, get_db
from enquiry_svc.schemas.enquiry import (
    AssignRequest,
    EnquiryCreate,
    EnquiryListResponse,
    EnquiryQuery,
    EnquiryResponse,
    EnquiryUpdate,
    MessageResponse,
    Pagination,
    StaffListResponse,
    StaffMember,
)
from enquiry_svc.services import enquiry_service
from enquiry_svc.routers.auth import get_current_user

logger = logging.getLogger(__name__)

enquiries_router = APIRouter()


@enquiries_router.post("/", response_model=EnquiryResponse, status_code=status.HTTP_201_CREATED)
def create_enquiry(payload: EnquiryCreate, db: Session = Depends(get_db)) -> EnquiryResponse:
    """Public submission; no authentication required."""
    enquiry = enquiry_service.create_enquiry(db, payload)
    return EnquiryResponse.model_validate(enquiry)


@enquiries_router.get("/", response_model=EnquiryListResponse)
def list_enquiries(
    query: Annotated[EnquiryQuery, Query()],
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EnquiryListResponse:
    """List enquiries with optional status filter and text search. Requires authentication."""
    page = enquiry_service.list_enquiries(db, query, current_user)
    return EnquiryListResponse(
        enquiries=[EnquiryResponse.model_validate(e) for e in page.items],
        pagination=Pagination(**page.as_pagination()),
    )


# declared before /{enquiry_id} so "staff" is not parsed as an id
@enquiries_router.get("/staff/list", response_model=StaffListResponse)
def list_staff(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> StaffListResponse:
    staff = enquiry_service.list_staff(db, current_user)
    return StaffListResponse(staff=[StaffMember.model_validate(u) for u in staff])


@enquiries_router.get("/{enquiry_id}", response_model=EnquiryResponse)
def get_enquiry(
    enquiry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EnquiryResponse:
    enquiry = enquiry_service.get_enquiry(db, enquiry_id, current_user)
    return EnquiryResponse.model_validate(enquiry)


@enquiries_router.put("/{enquiry_id}", response_model=EnquiryResponse)
def update_enquiry(
    enquiry_id: int,
    payload: EnquiryUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EnquiryResponse:
    """Update status and/or assignment, constrained by the caller's role."""
    enquiry = enquiry_service.update_enquiry(db, enquiry_id, payload, current_user)
    return EnquiryResponse.model_validate(enquiry)


@enquiries_router.delete("/{enquiry_id}", response_model=MessageResponse)
def delete_enquiry(
    enquiry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MessageResponse:
    enquiry_service.delete_enquiry(db, enquiry_id, current_user)
    return MessageResponse(message="Enquiry deleted successfully")


@enquiries_router.post("/{enquiry_id}/assign", response_model=EnquiryResponse)
def assign_enquiry(
    enquiry_id: int,
    payload: AssignRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EnquiryResponse:
    enquiry = enquiry_service.assign_enquiry(db, enquiry_id, payload.assigned_to, current_user)
    return EnquiryResponse.model_validate(enquiry)


@enquiries_router.post("/{enquiry_id}/unassign", response_model=EnquiryResponse)
def unassign_enquiry(
    enquiry_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> EnquiryResponse:
    enquiry = enquiry_service.unassign_enquiry(db, enquiry_id, current_user)
    return EnquiryResponse.model_validate(enquiry)
