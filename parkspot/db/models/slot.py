"""Slot and TimeInterval models."""

from uuid import uuid4

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    ForeignKey,
    Integer,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from parkspot.db.base import Base
from parkspot.db.types import UTCDateTime
from parkspot.timeutils import utcnow


class Slot(Base):
    """One physical parking space and its timing ledger."""

    __tablename__ = "slots"

    id = Column(Uuid, primary_key=True, default=uuid4)
    parking_id = Column(
        Uuid,
        ForeignKey("parkings.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False)
    is_available = Column(Boolean, nullable=False, default=True)
    # Bumped by every write to the row; concurrent writers fail with StaleDataError
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

    __table_args__ = (UniqueConstraint("parking_id", "position", name="uq_slot_position"),)
    __mapper_args__ = {"version_id_col": version}

    # Relationships
    parking = relationship("Parking", back_populates="slots")
    timing = relationship(
        "TimeInterval",
        back_populates="slot",
        order_by="TimeInterval.start",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="selectin",
    )

    def __repr__(self):
        return f"<Slot(id={self.id}, position={self.position}, available={self.is_available})>"


class TimeInterval(Base):
    """A [start, end) window on a slot, reserved or kept as history."""

    __tablename__ = "slot_timings"

    id = Column(Uuid, primary_key=True, default=uuid4)
    slot_id = Column(
        Uuid,
        ForeignKey("slots.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    start = Column("start_time", UTCDateTime, nullable=False)
    end = Column("end_time", UTCDateTime, nullable=False)
    is_reserved = Column(Boolean, nullable=False, default=False)
    reserved_by = Column(Uuid, nullable=True)
    created_at = Column(
        UTCDateTime,
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="check_timing_window"),
        CheckConstraint(
            "(is_reserved AND reserved_by IS NOT NULL) OR (NOT is_reserved AND reserved_by IS NULL)",
            name="check_reserved_by",
        ),
    )

    # Relationships
    slot = relationship("Slot", back_populates="timing")

    def contains(self, moment) -> bool:
        return self.start <= moment < self.end

    def __repr__(self):
        return (
            f"<TimeInterval(start={self.start}, end={self.end}, "
            f"reserved={self.is_reserved})>"
        )
