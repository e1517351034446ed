from sqlalchemy import Boolean, Column, Integer, String, Text, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship
from sqlalchemy import Enum as SAEnum

from .base import Base
from .enums import EnquiryStatus


class Enquiry(Base):
    __tablename__ = "enquiries"
    __table_args__ = (
        Index("ix_enquiries_status_is_deleted", "status", "is_deleted"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    customer_name = Column(String(100), nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String(20), nullable=False)
    message = Column(Text, nullable=False)
    status = Column(
        SAEnum(EnquiryStatus, native_enum=False, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=EnquiryStatus.New,
    )
    assigned_to_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=func.now(), index=True)
    updated_at = Column(DateTime, default=func.now(), onupdate=func.now())

    # non-owning reference; deleting the user never deletes the enquiry
    assignee = relationship("User", back_populates="assigned_enquiries")

    @classmethod
    def not_deleted(cls):
        """Filter expression excluding soft-deleted rows."""
        return cls.is_deleted.is_(False)

    def __repr__(self) -> str:
        return f"<Enquiry(id={self.id}, customer_name='{self.customer_name}', status='{self.status}')>"
