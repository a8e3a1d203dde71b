"""
Job-related Pydantic schemas.

This module contains request and response schemas for scheduled service
jobs (inspections, installations, maintenance and emergency call-outs).
"""

from backend.models.records import JobCreate, JobRecord, JobUpdate


class JobCreateRequest(JobCreate):
    """Request body for creating a job."""

    class Config:
        json_schema_extra = {
            "example": {
                "customerId": "0b5f7a0e-9c1e-4c59-9a51-2f8a1d6c3e10",
                "title": "Annual",
                "jobType": "Inspection",
                "scheduledDate": "2025-01-15",
                "scheduledTime": "09:00",
                "estimatedDuration": 60,
                "price": "150"
            }
        }


class JobUpdateRequest(JobUpdate):
    """Request body for a partial job update."""

    class Config:
        json_schema_extra = {
            "example": {
                "status": "Completed",
                "notes": "All extinguishers serviced"
            }
        }


class JobResponse(JobRecord):
    """Stored job as returned by the API."""

    class Config:
        json_schema_extra = {
            "example": {
                "id": "5d0c2f3b-1e7a-4f0e-8a4b-7c9d2e1f6a33",
                "customerId": "0b5f7a0e-9c1e-4c59-9a51-2f8a1d6c3e10",
                "title": "Annual",
                "description": None,
                "jobType": "Inspection",
                "status": "Scheduled",
                "scheduledDate": "2025-01-15",
                "scheduledTime": "09:00",
                "estimatedDuration": 60,
                "price": "150",
                "notes": None,
                "createdAt": "2025-01-10T09:20:00"
            }
        }
