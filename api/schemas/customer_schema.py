"""
Customer-related Pydantic schemas.

Request bodies validate through the shared record schemas, so the API
and the spreadsheet importer accept exactly the same fields.
"""

from backend.models.records import CustomerCreate, CustomerRecord, CustomerUpdate


class CustomerCreateRequest(CustomerCreate):
    """Request body for creating a customer."""

    class Config:
        json_schema_extra = {
            "example": {
                "companyName": "Acme Co",
                "contactPerson": "Ann Smith",
                "email": "ann@acme.com",
                "phone": "555-0100",
                "address": "1 Main St",
                "customerType": "Commercial"
            }
        }


class CustomerUpdateRequest(CustomerUpdate):
    """Request body for a partial customer update."""

    class Config:
        json_schema_extra = {
            "example": {
                "status": "Inactive",
                "nextDue": "2025-03-01"
            }
        }


class CustomerResponse(CustomerRecord):
    """Stored customer as returned by the API."""

    class Config:
        json_schema_extra = {
            "example": {
                "id": "0b5f7a0e-9c1e-4c59-9a51-2f8a1d6c3e10",
                "companyName": "Acme Co",
                "contactPerson": "Ann Smith",
                "email": "ann@acme.com",
                "phone": "555-0100",
                "address": "1 Main St",
                "customerType": "Commercial",
                "status": "Active",
                "lastInspection": None,
                "nextDue": None,
                "createdAt": "2025-01-10T09:15:00"
            }
        }
