"""Reservation model."""

import enum
from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, Numeric, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from parkspot.db.base import Base
from parkspot.db.types import UTCDateTime
from parkspot.timeutils import utcnow


class ReservationStatus(str, enum.Enum):
    UPCOMING = "upcoming"
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Reservation(Base):
    """A user's booking of a slot for a time window."""

    __tablename__ = "reservations"

    id = Column(Uuid, primary_key=True, default=uuid4)
    # Users live in the identity service; no FK
    user_id = Column(Uuid, nullable=False, index=True)
    slot_id = Column(
        Uuid,
        ForeignKey("slots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    parking_id = Column(
        Uuid,
        ForeignKey("parkings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start = Column("start_time", UTCDateTime, nullable=False)
    end = Column("end_time", UTCDateTime, nullable=False)
    status = Column(String(16), nullable=False, default=ReservationStatus.UPCOMING.value)
    price = Column(Numeric(10, 2), nullable=False)
    version = Column(Integer, nullable=False)
    created_at = Column(
        UTCDateTime,
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        UTCDateTime,
        default=utcnow,
        onupdate=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('upcoming', 'active', 'completed', 'cancelled')",
            name="check_reservation_status",
        ),
        CheckConstraint("start_time < end_time", name="check_reservation_window"),
        CheckConstraint("price > 0", name="check_reservation_price"),
    )
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    slot = relationship("Slot")
    parking = relationship("Parking", back_populates="reservations")

    def __repr__(self):
        return f"<Reservation(id={self.id}, status={self.status}, start={self.start})>"
