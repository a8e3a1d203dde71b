"""
SQLAlchemy models for the FireOps business manager.

This module defines the declarative base and the customers table,
matching the schema defined in Alembic migrations.
"""

import uuid
from datetime import datetime
from enum import Enum
from sqlalchemy import (
    Column, String, Text, Date, TIMESTAMP, CheckConstraint, Index
)
from sqlalchemy.orm import declarative_base, relationship

Base = declarative_base()


def generate_id() -> str:
    """Generate a server-side record identifier."""
    return str(uuid.uuid4())


class CustomerType(str, Enum):
    """Customer classification."""
    COMMERCIAL = 'Commercial'
    RESIDENTIAL = 'Residential'
    INDUSTRIAL = 'Industrial'


class CustomerStatus(str, Enum):
    """Customer account status."""
    ACTIVE = 'Active'
    INACTIVE = 'Inactive'


class Customer(Base):
    """Represents a client account."""

    __tablename__ = 'customers'
    __table_args__ = (
        CheckConstraint(
            "customer_type IN ('Commercial', 'Residential', 'Industrial')",
            name='customers_customer_type_check'
        ),
        CheckConstraint(
            "status IN ('Active', 'Inactive')",
            name='customers_status_check'
        ),
        Index('idx_customers_created_at', 'created_at'),
        Index('idx_customers_company_name', 'company_name'),
        {'comment': 'Client accounts with contact and classification data'}
    )

    id = Column(
        String(36),
        primary_key=True,
        default=generate_id,
        nullable=False
    )
    company_name = Column(Text, nullable=False)
    contact_person = Column(Text, nullable=False)
    email = Column(Text, nullable=False)
    phone = Column(Text, nullable=False)
    address = Column(Text, nullable=False)
    customer_type = Column(
        String(20),
        nullable=False,
        comment='Commercial, Residential or Industrial'
    )
    status = Column(
        String(20),
        nullable=False,
        default=CustomerStatus.ACTIVE.value,
        server_default=CustomerStatus.ACTIVE.value
    )
    last_inspection = Column(Date, nullable=True)
    next_due = Column(Date, nullable=True)
    created_at = Column(
        TIMESTAMP,
        default=datetime.utcnow,
        nullable=False,
        comment='Record creation timestamp'
    )

    # Relationship to jobs (no cascade, deleting a customer leaves its jobs)
    jobs = relationship('Job', back_populates='customer', passive_deletes='all')

    def __repr__(self):
        return f"<Customer(id='{self.id}', company_name='{self.company_name}')>"
