from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from enquiry_svc.models import User, get_db
from enquiry_svc.schemas.enquiry import MessageResponse, Pagination
from enquiry_svc.schemas.user import (
    PageQuery,
    UserCreate,
    UserListResponse,
    UserResponse,
    UserRoleUpdate,
    UserUpdate,
)
from enquiry_svc.services import user_service
from enquiry_svc.routers.auth import require_admin

logger = logging.getLogger(__name__)

# every user management route is admin only
users_router = APIRouter(dependencies=[Depends(require_admin)])


@users_router.post("/", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db)) -> User:
    return user_service.create_user(db, payload)


@users_router.get("/", response_model=UserListResponse)
def list_users(
    query: Annotated[PageQuery, Query()],
    db: Session = Depends(get_db),
) -> UserListResponse:
    page = user_service.list_users(db, query.page, query.limit)
    return UserListResponse(
        users=[UserResponse.model_validate(u) for u in page.items],
        pagination=Pagination(**page.as_pagination()),
    )


@users_router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, payload: UserUpdate, db: Session = Depends(get_db)) -> User:
    return user_service.update_user(db, user_id, payload)


@users_router.put("/{user_id}/role", response_model=UserResponse)
def update_user_role(user_id: int, payload: UserRoleUpdate, db: Session = Depends(get_db)) -> User:
    return user_service.update_user_role(db, user_id, payload.role)


@users_router.delete("/{user_id}", response_model=MessageResponse)
def delete_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin),
) -> MessageResponse:
    user_service.delete_user(db, user_id)
    logger.info("User %s deleted by admin %s", user_id, current_user.id)
    return MessageResponse(message="User deleted successfully")
