"""
Pydantic schemas for request/response validation.

This package contains all Pydantic models used for API request validation
and response serialization.
"""

from api.schemas.common import ErrorResponse, HealthCheckResponse, SuccessResponse
from api.schemas.customer_schema import (
    CustomerCreateRequest, CustomerUpdateRequest, CustomerResponse
)
from api.schemas.job_schema import JobCreateRequest, JobUpdateRequest, JobResponse
from api.schemas.import_schema import ImportResultResponse, SkippedRowResponse

__all__ = [
    # Common
    'ErrorResponse',
    'HealthCheckResponse',
    'SuccessResponse',
    
    # Customer
    'CustomerCreateRequest',
    'CustomerUpdateRequest',
    'CustomerResponse',
    
    # Job
    'JobCreateRequest',
    'JobUpdateRequest',
    'JobResponse',
    
    # Import
    'ImportResultResponse',
    'SkippedRowResponse',
]
