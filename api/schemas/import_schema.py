"""
Import-related Pydantic schemas.

This module contains schemas for spreadsheet upload responses.
"""

from typing import List
from pydantic import Field

from backend.models.records import RecordModel


class SkippedRowResponse(RecordModel):
    """A worksheet row the importer could not use."""

    sheet: str = Field(..., description="Worksheet name")
    row: int = Field(..., description="1-based worksheet row number")
    reason: str = Field(..., description="Why the row was skipped")


class ImportResultResponse(RecordModel):
    """Outcome of a spreadsheet upload."""

    success: bool = Field(True, description="Whether the workbook was processed")
    filename: str = Field(..., description="Uploaded file name")
    size: int = Field(..., description="Uploaded file size in bytes")
    customers_created: int = Field(
        ..., description="Customers created, including those created for unmatched job rows"
    )
    jobs_created: int = Field(..., description="Jobs created")
    skipped_rows: List[SkippedRowResponse] = Field(
        default_factory=list, description="Rows that failed validation or creation"
    )
    message: str = Field(..., description="Human-readable summary")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "filename": "import.xlsx",
                "size": 8734,
                "customersCreated": 1,
                "jobsCreated": 1,
                "skippedRows": [],
                "message": "Imported 1 customers and 1 jobs"
            }
        }
