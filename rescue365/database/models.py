"""
SQLAlchemy models for Rescue365
Mirrors the hosted rescue_reports table column for column.
"""

from datetime import datetime

from sqlalchemy import Column, Integer, Float, String, Text, DateTime, Index
from sqlalchemy.orm import declarative_base

from rescue365.core.constants import STATUS_PENDING

Base = declarative_base()


class RescueReportRecord(Base):
    """
    Animal rescue report submitted by a bystander.

    Status is a free-form string; the lifecycle decides what it may hold.
    """
    __tablename__ = "rescue_reports"

    id = Column(Integer, primary_key=True, index=True)

    # Animal
    animal_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    image_url = Column(String(1000), nullable=False)

    # Location
    location_lat = Column(Float, nullable=False)
    location_lng = Column(Float, nullable=False)
    address = Column(String(500))

    # Lifecycle
    status = Column(String(50), nullable=False, default=STATUS_PENDING)
    reported_by = Column(String(100))

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index("idx_rescue_report_status", status),
    )

    def __repr__(self):
        return f"<RescueReportRecord({self.id}, status={self.status}, lat={self.location_lat})>"

    def to_dict(self) -> dict:
        """Convert to a table row dictionary."""
        return {
            "id": self.id,
            "animal_type": self.animal_type,
            "description": self.description,
            "location_lat": self.location_lat,
            "location_lng": self.location_lng,
            "address": self.address,
            "image_url": self.image_url,
            "status": self.status,
            "reported_by": self.reported_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
