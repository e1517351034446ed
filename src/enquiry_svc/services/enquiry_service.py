from typing import List
import logging

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from enquiry_svc.errors import NotFoundError, ValidationError
from enquiry_svc.models import User, Enquiry
from enquiry_svc.models.enums import UserRole, EnquiryStatus
from enquiry_svc.schemas.enquiry import EnquiryCreate, EnquiryQuery, EnquiryUpdate
from enquiry_svc.services.policy import EnquiryAction, ASSIGNEE_FIELD, STATUS_FIELD, enforce, enforce_role, check_assignee
from enquiry_svc.utils.pagination import Page, paginate

logger = logging.getLogger(__name__)

# patch field -> Enquiry attribute
_UPDATABLE_COLUMNS = {
    STATUS_FIELD: "status",
    ASSIGNEE_FIELD: "assigned_to_id",
}


def _get_active_enquiry(db: Session, enquiry_id: int) -> Enquiry:
    try:
        stmt = select(Enquiry).where(Enquiry.id == enquiry_id, Enquiry.not_deleted())
        enquiry = db.execute(stmt).scalar_one_or_none()
    except Exception as e:
        logger.error(e, exc_info=True)
        raise

    if enquiry is None:
        raise NotFoundError("Enquiry not found")
    return enquiry


def _commit(db: Session, instance) -> None:
    try:
        db.commit()
        db.refresh(instance)
    except Exception as e:
        logger.error(e, exc_info=True)
        try:
            db.rollback()
        except Exception as ex:
            logger.error(ex, exc_info=True)
        # re-raise to let callers translate to HTTP responses
        raise


def create_enquiry(db: Session, data: EnquiryCreate) -> Enquiry:
    """Persist a new public enquiry as new, unassigned and not deleted."""
    enquiry = Enquiry(
        customer_name=data.customer_name,
        email=str(data.email),
        phone=data.phone,
        message=data.message,
        status=EnquiryStatus.New,
        assigned_to_id=None,
        is_deleted=False,
    )
    db.add(enquiry)
    _commit(db, enquiry)
    logger.info("Created enquiry %s", enquiry.id)
    return enquiry


def _search_clause(db: Session, text: str):
    """Case-insensitive substring match over name, email and message.

    SQLite gets the ``casefold`` function registered in ``models.base``;
    other backends fold with their own Unicode-aware ``lower``.
    """
    if db.get_bind().dialect.name == "sqlite":
        fold, term = func.casefold, text.casefold()
    else:
        fold, term = func.lower, text.lower()
    columns = (Enquiry.customer_name, Enquiry.email, Enquiry.message)
    return or_(*(fold(column).contains(term, autoescape=True) for column in columns))


def list_enquiries(db: Session, query: EnquiryQuery, actor: User) -> Page:
    """Return one page of non-deleted enquiries, newest first.

    ``search`` is a case-insensitive substring match over customer name,
    email and message.
    """
    enforce(actor.role, EnquiryAction.Read, actor_id=actor.id)

    stmt = select(Enquiry).where(Enquiry.not_deleted())
    if query.status is not None:
        stmt = stmt.where(Enquiry.status == query.status)
    if query.search:
        stmt = stmt.where(_search_clause(db, query.search.strip()))
    stmt = stmt.order_by(Enquiry.created_at.desc(), Enquiry.id.desc())

    return paginate(db, stmt, query.page, query.limit)


def get_enquiry(db: Session, enquiry_id: int, actor: User) -> Enquiry:
    enforce(actor.role, EnquiryAction.Read, actor_id=actor.id)
    return _get_active_enquiry(db, enquiry_id)


def update_enquiry(db: Session, enquiry_id: int, patch: EnquiryUpdate, actor: User) -> Enquiry:
    """Apply a role-constrained partial update.

    Admins may change status and assignment; staff may change status only on
    enquiries assigned to them. An explicit null assignee clears the assignment.
    """
    enforce_role(actor.role, EnquiryAction.Update, actor_id=actor.id)
    enquiry = _get_active_enquiry(db, enquiry_id)
    update_data = patch.model_dump(exclude_unset=True)

    decision = enforce(
        actor.role,
        EnquiryAction.Update,
        actor_id=actor.id,
        assigned_to_id=enquiry.assigned_to_id,
        fields=update_data.keys(),
    )

    if STATUS_FIELD in update_data and update_data[STATUS_FIELD] is None:
        raise ValidationError("Status cannot be empty")
    if update_data.get(ASSIGNEE_FIELD) is not None:
        check_assignee(db.get(User, update_data[ASSIGNEE_FIELD]))

    for name in decision.allowed_fields.intersection(update_data):
        setattr(enquiry, _UPDATABLE_COLUMNS[name], update_data[name])

    if update_data:
        _commit(db, enquiry)
        logger.info("Enquiry %s updated by user %s: %s", enquiry.id, actor.id, sorted(update_data))
    return enquiry


def delete_enquiry(db: Session, enquiry_id: int, actor: User) -> None:
    """Soft delete; there is no restore."""
    enforce(actor.role, EnquiryAction.Delete, actor_id=actor.id)
    enquiry = _get_active_enquiry(db, enquiry_id)
    enquiry.is_deleted = True
    _commit(db, enquiry)
    logger.info("Enquiry %s deleted by user %s", enquiry.id, actor.id)


def assign_enquiry(db: Session, enquiry_id: int, assignee_id: int, actor: User) -> Enquiry:
    enforce(actor.role, EnquiryAction.Assign, actor_id=actor.id)
    enquiry = _get_active_enquiry(db, enquiry_id)

    check_assignee(db.get(User, assignee_id))

    enquiry.assigned_to_id = assignee_id
    _commit(db, enquiry)
    logger.info("Enquiry %s assigned to user %s", enquiry.id, assignee_id)
    return enquiry


def unassign_enquiry(db: Session, enquiry_id: int, actor: User) -> Enquiry:
    enforce(actor.role, EnquiryAction.Unassign, actor_id=actor.id)
    enquiry = _get_active_enquiry(db, enquiry_id)

    enquiry.assigned_to_id = None
    _commit(db, enquiry)
    logger.info("Enquiry %s unassigned", enquiry.id)
    return enquiry


def list_staff(db: Session, actor: User) -> List[User]:
    """Users that enquiries may be assigned to, ordered by name."""
    enforce(actor.role, EnquiryAction.ListStaff, actor_id=actor.id)
    try:
        stmt = (
            select(User)
            .where(User.role.in_([UserRole.Admin, UserRole.Staff]))
            .order_by(User.name.asc(), User.id.asc())
        )
        return list(db.execute(stmt).scalars().all())
    except Exception as e:
        logger.error(e, exc_info=True)
        raise
