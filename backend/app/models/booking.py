"""
Booking model linking a user to an event they reserved.

A booking either exists (active) or is deleted (cancelled); there is no
status column. The unique constraint on (user_id, event_id) backs the
one-booking-per-event rule.
"""

from sqlalchemy import Column, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)

    user = relationship("User")
    event = relationship("Event")

    __table_args__ = (
        UniqueConstraint("user_id", "event_id", name="uq_user_event_booking"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, event={self.event_id})>"
