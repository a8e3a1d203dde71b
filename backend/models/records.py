"""
Pydantic record schemas shared by both storage backends.

These are the validated shapes of customers and jobs as they enter and
leave the storage layer. The manual-entry API and the spreadsheet importer
validate through the same Create/Update schemas.
"""

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from backend.models.schema import CustomerStatus, CustomerType
from backend.models.job import JobStatus, JobType


class RecordModel(BaseModel):
    """Base for records exchanged as camelCase JSON."""

    class Config:
        from_attributes = True
        populate_by_name = True
        alias_generator = to_camel
        use_enum_values = True


def _reject_nulls(model: BaseModel, required: tuple) -> None:
    """Partial updates may omit required fields but may not null them."""
    for name in required:
        if name in model.model_fields_set and getattr(model, name) is None:
            raise ValueError(f"{name} cannot be null")


# ---------------------------------------------------------------------------
# Customers
# ---------------------------------------------------------------------------

class CustomerCreate(RecordModel):
    """Customer fields accepted on creation."""

    company_name: str = Field(..., min_length=1, description="Company name")
    contact_person: str = Field(..., description="Primary contact")
    email: str = Field(..., description="Contact email")
    phone: str = Field(..., description="Contact phone")
    address: str = Field(..., description="Site address")
    customer_type: CustomerType = Field(..., description="Customer classification")
    status: CustomerStatus = Field(CustomerStatus.ACTIVE, description="Account status")
    last_inspection: Optional[date] = Field(None, description="Date of last inspection")
    next_due: Optional[date] = Field(None, description="Date next inspection is due")


class CustomerUpdate(RecordModel):
    """Partial customer update; only fields that were set are applied."""

    company_name: Optional[str] = Field(None, min_length=1)
    contact_person: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    customer_type: Optional[CustomerType] = None
    status: Optional[CustomerStatus] = None
    last_inspection: Optional[date] = None
    next_due: Optional[date] = None

    @model_validator(mode='after')
    def check_required_not_null(self):
        _reject_nulls(self, (
            'company_name', 'contact_person', 'email', 'phone',
            'address', 'customer_type', 'status'
        ))
        return self


class CustomerRecord(CustomerCreate):
    """Stored customer."""

    id: str = Field(..., description="Server-generated identifier")
    created_at: datetime = Field(..., description="Creation timestamp")


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------

PRICE_MAX_INTEGER_DIGITS = 8
PRICE_DECIMAL_PLACES = 2
PRICE_LIMIT = Decimal(10) ** PRICE_MAX_INTEGER_DIGITS
PRICE_QUANTUM = Decimal(1).scaleb(-PRICE_DECIMAL_PLACES)


def normalize_price(value: Any) -> Optional[str]:
    """
    Normalize a price to canonical decimal text.

    Prices must fit NUMERIC(10,2): at most 8 integer digits and 2 decimal
    places. The canonical form drops trailing fractional zeros, so
    '150.00', 150 and ' 150 ' all become '150' and '99.50' becomes '99.5'.
    Empty values become None. Anything else raises ValueError.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError("price must be a decimal number")
    text = str(value).strip()
    if not text:
        return None
    try:
        amount = Decimal(text)
    except InvalidOperation:
        raise ValueError(f"price '{text}' is not a decimal number")
    if not amount.is_finite():
        raise ValueError(f"price '{text}' is not a decimal number")
    if abs(amount) >= PRICE_LIMIT:
        raise ValueError(f"price '{text}' has more than {PRICE_MAX_INTEGER_DIGITS} integer digits")
    if amount != amount.quantize(PRICE_QUANTUM):
        raise ValueError(f"price '{text}' has more than {PRICE_DECIMAL_PLACES} decimal places")
    canonical = format(amount.normalize(), 'f')
    return '0' if canonical == '-0' else canonical


class JobCreate(RecordModel):
    """Job fields accepted on creation."""

    customer_id: str = Field(..., min_length=1, description="Owning customer ID")
    title: str = Field(..., min_length=1, description="Job title")
    description: Optional[str] = Field(None, description="Job description")
    job_type: JobType = Field(..., description="Kind of engagement")
    status: JobStatus = Field(JobStatus.SCHEDULED, description="Lifecycle status")
    scheduled_date: date = Field(..., description="Calendar date of the visit")
    scheduled_time: str = Field(..., min_length=1, description="Free text HH:MM")
    estimated_duration: Optional[int] = Field(None, ge=0, description="Minutes")
    price: Optional[str] = Field(None, description="Decimal price as text")
    notes: Optional[str] = Field(None, description="Free-form notes")

    @field_validator('price', mode='before')
    @classmethod
    def check_price(cls, value):
        return normalize_price(value)


class JobUpdate(RecordModel):
    """Partial job update; only fields that were set are applied."""

    customer_id: Optional[str] = Field(None, min_length=1)
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    job_type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    scheduled_date: Optional[date] = None
    scheduled_time: Optional[str] = Field(None, min_length=1)
    estimated_duration: Optional[int] = Field(None, ge=0)
    price: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('price', mode='before')
    @classmethod
    def check_price(cls, value):
        return normalize_price(value)

    @model_validator(mode='after')
    def check_required_not_null(self):
        _reject_nulls(self, (
            'customer_id', 'title', 'job_type', 'status',
            'scheduled_date', 'scheduled_time'
        ))
        return self


class JobRecord(JobCreate):
    """Stored job."""

    id: str = Field(..., description="Server-generated identifier")
    created_at: datetime = Field(..., description="Creation timestamp")
