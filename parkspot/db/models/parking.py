"""Parking model."""

from uuid import uuid4

from sqlalchemy import JSON, CheckConstraint, Column, Float, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from parkspot.db.base import Base
from parkspot.db.types import UTCDateTime
from parkspot.timeutils import utcnow


class Parking(Base):
    """Parking location - owns a fixed set of slots."""

    __tablename__ = "parkings"

    id = Column(Uuid, primary_key=True, default=uuid4)
    name = Column(String(255), nullable=False)
    address = Column(String(512), nullable=False)
    description = Column(Text, nullable=False, default="")
    banner = Column(String(512), nullable=True)  # URL on the media host
    hours_start = Column(String(5), nullable=False)  # "HH:MM"
    hours_end = Column(String(5), nullable=False)
    rate_per_hour = Column(Numeric(10, 2), nullable=False)
    total_spots = Column(Integer, nullable=False)
    # Set at creation only; slot-level availability is tracked on Slot
    available_spots = Column(Integer, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    rating = Column(Float, nullable=False, default=0.0)
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
        CheckConstraint("total_spots > 0", name="check_total_spots"),
        CheckConstraint("rate_per_hour > 0", name="check_rate_per_hour"),
    )

    # Relationships
    slots = relationship(
        "Slot",
        back_populates="parking",
        order_by="Slot.position",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reservations = relationship(
        "Reservation",
        back_populates="parking",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Parking(id={self.id}, name={self.name})>"
