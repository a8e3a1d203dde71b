"""
Job scheduling models.

This module defines the SQLAlchemy model for scheduled service
engagements, each tied to exactly one customer.
"""

from enum import Enum
from datetime import datetime
from sqlalchemy import (
    Column, Integer, String, Text, Date, TIMESTAMP, Numeric, ForeignKey,
    CheckConstraint, Index
)
from sqlalchemy.orm import relationship

from backend.models.schema import Base, generate_id


class JobType(str, Enum):
    """Kind of service engagement."""
    INSPECTION = 'Inspection'
    INSTALLATION = 'Installation'
    MAINTENANCE = 'Maintenance'
    EMERGENCY = 'Emergency'


class JobStatus(str, Enum):
    """Job lifecycle status."""
    SCHEDULED = 'Scheduled'
    IN_PROGRESS = 'In Progress'
    COMPLETED = 'Completed'
    CANCELLED = 'Cancelled'
    OVERDUE = 'Overdue'


class Job(Base):
    """
    Represents a scheduled service engagement.

    Stores scheduling data, pricing and notes for a single visit
    to a customer site.
    """

    __tablename__ = 'jobs'
    __table_args__ = (
        CheckConstraint(
            "job_type IN ('Inspection', 'Installation', 'Maintenance', 'Emergency')",
            name='jobs_job_type_check'
        ),
        CheckConstraint(
            "status IN ('Scheduled', 'In Progress', 'Completed', 'Cancelled', 'Overdue')",
            name='jobs_status_check'
        ),
        Index('idx_jobs_customer_id', 'customer_id'),
        Index('idx_jobs_scheduled_date', 'scheduled_date'),
        Index('idx_jobs_status_type', 'status', 'job_type'),
        {'comment': 'Scheduled service engagements'}
    )

    id = Column(
        String(36),
        primary_key=True,
        default=generate_id,
        nullable=False
    )
    customer_id = Column(
        String(36),
        ForeignKey('customers.id'),
        nullable=False,
        comment='Owning customer'
    )
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=True)
    job_type = Column(
        String(20),
        nullable=False,
        comment='Inspection, Installation, Maintenance or Emergency'
    )
    status = Column(
        String(20),
        nullable=False,
        default=JobStatus.SCHEDULED.value,
        server_default=JobStatus.SCHEDULED.value
    )
    scheduled_date = Column(Date, nullable=False)
    scheduled_time = Column(
        Text,
        nullable=False,
        comment='Free text HH:MM'
    )
    estimated_duration = Column(
        Integer,
        nullable=True,
        comment='Estimated duration in minutes'
    )
    price = Column(Numeric(precision=10, scale=2), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(
        TIMESTAMP,
        default=datetime.utcnow,
        nullable=False,
        comment='Record creation timestamp'
    )

    customer = relationship('Customer', back_populates='jobs')

    def __repr__(self):
        return f"<Job(id='{self.id}', title='{self.title}', status='{self.status}')>"
