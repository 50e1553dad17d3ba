"""
Event model.

Key design decisions:
- Unique title across all events (storage-level guard for the duplicate-title rule)
- `creator` is set on creation and never reassigned
- No ORM cascade to bookings: deletes are cascaded explicitly by the services
"""

from sqlalchemy import Column, Integer, String, Text, Float, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(200), unique=True, nullable=False)
    description = Column(Text, nullable=False)
    price = Column(Float, nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    creator_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    creator = relationship("User")

    __table_args__ = (
        CheckConstraint("price > 0", name="check_event_price_positive"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title}, creator={self.creator_id})>"
