from typing import Optional
import logging

from sqlalchemy import select, update as sa_update
from sqlalchemy.orm import Session

import enquiry_svc.utils.security as security
from enquiry_svc.errors import ConflictError, LastAdminError, NotFoundError
from enquiry_svc.models import User, Enquiry
from enquiry_svc.models.enums import UserRole
from enquiry_svc.schemas.auth import RegisterRequest
from enquiry_svc.schemas.user import UserCreate, UserUpdate
from enquiry_svc.utils.pagination import Page, paginate

logger = logging.getLogger(__name__)


def _commit(db: Session, instance=None) -> None:
    try:
        db.commit()
        if instance is not None:
            db.refresh(instance)
    except Exception as e:
        logger.error(e, exc_info=True)
        try:
            db.rollback()
        except Exception as ex:
            logger.error(ex, exc_info=True)
        raise


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    try:
        return db.execute(select(User).where(User.email == email.strip().lower())).scalar_one_or_none()
    except Exception as e:
        logger.error(e, exc_info=True)
        raise


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def admin_rows_stmt():
    # locks every admin row so concurrent demotions/deletions of admins queue
    # behind each other (no-op on SQLite)
    return select(User.id).where(User.role == UserRole.Admin).with_for_update()


def count_admins(db: Session) -> int:
    return len(db.execute(admin_rows_stmt()).scalars().all())


def _ensure_email_available(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    existing = get_user_by_email(db, email)
    if existing is not None and existing.id != exclude_id:
        raise ConflictError("User already exists with this email")


def _clear_assignments(db: Session, user_id: int) -> None:
    # keeps enquiries from pointing at users that can no longer own them
    db.execute(sa_update(Enquiry).where(Enquiry.assigned_to_id == user_id).values(assigned_to_id=None))


def _apply_role(db: Session, user: User, role: UserRole) -> None:
    """Change a user's role, guarding the last admin and stale assignments."""
    if user.role == role:
        return
    if user.is_admin and count_admins(db) <= 1:
        raise LastAdminError("Cannot change the role of the last admin user")
    if role == UserRole.User:
        _clear_assignments(db, user.id)
    user.role = role


def authenticate_user(db: Session, email: str, password: str) -> Optional[User]:
    """Return the user for valid credentials, otherwise None."""
    user = get_user_by_email(db, email)
    if user is None:
        return None
    try:
        verified = security.verify_password(password, user.hashed_password)
    except ValueError as e:
        logger.error(e, exc_info=True)
        return None
    return user if verified else None


def register_user(db: Session, data: RegisterRequest) -> User:
    """Public self-registration.

    New accounts get the ``user`` role. The first admin may register itself
    while no admin exists; staff accounts are created by admins only.
    """
    role = data.role or UserRole.User
    _ensure_email_available(db, str(data.email))

    if role == UserRole.Admin and count_admins(db) > 0:
        raise ConflictError("Admin already exists.")
    if role == UserRole.Staff:
        raise ConflictError("Staff accounts can only be created by an admin")

    user = User(
        name=data.name,
        email=str(data.email).strip().lower(),
        hashed_password=security.get_password_hash(data.password),
        role=role,
    )
    db.add(user)
    _commit(db, user)
    logger.info("Registered user %s with role %s", user.id, role.value)
    return user


def create_user(db: Session, data: UserCreate) -> User:
    _ensure_email_available(db, str(data.email))

    user = User(
        name=data.name,
        email=str(data.email),
        hashed_password=security.get_password_hash(data.password),
        role=data.role,
    )
    db.add(user)
    _commit(db, user)
    logger.info("Created user %s with role %s", user.id, data.role.value)
    return user


def list_users(db: Session, page: int, limit: int) -> Page:
    stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
    return paginate(db, stmt, page, limit)


def update_user(db: Session, user_id: int, data: UserUpdate) -> User:
    user = get_user(db, user_id)

    if data.email is not None and data.email != user.email:
        _ensure_email_available(db, str(data.email), exclude_id=user.id)
        user.email = str(data.email)

    if data.password is not None:
        user.hashed_password = security.get_password_hash(data.password)

    if data.name is not None:
        user.name = data.name

    if data.role is not None:
        _apply_role(db, user, data.role)

    _commit(db, user)
    return user


def update_user_role(db: Session, user_id: int, role: UserRole) -> User:
    user = get_user(db, user_id)
    _apply_role(db, user, role)
    _commit(db, user)
    logger.info("User %s role set to %s", user.id, role.value)
    return user


def delete_user(db: Session, user_id: int) -> None:
    """Hard delete a user; the last admin cannot be deleted.

    Enquiries assigned to the user are left unassigned.
    """
    user = get_user(db, user_id)

    if user.is_admin and count_admins(db) <= 1:
        raise LastAdminError("Cannot delete the last admin user")

    _clear_assignments(db, user.id)
    db.delete(user)
    _commit(db)
    logger.info("Deleted user %s", user_id)
