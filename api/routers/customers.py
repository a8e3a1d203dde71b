"""
Customers router - CRUD operations for customer accounts.

This module provides endpoints for managing customers and listing the
jobs booked for each of them.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_current_user, get_storage
from api.schemas.common import SuccessResponse
from api.schemas.customer_schema import (
    CustomerCreateRequest, CustomerResponse, CustomerUpdateRequest
)
from api.schemas.job_schema import JobResponse
from services.storage_service import IStorage

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix='/customers', tags=['customers'])


@router.get('', response_model=List[CustomerResponse])
async def list_customers(storage: IStorage = Depends(get_storage)):
    """
    List all customers, newest first.

    **Example:**
    ```bash
    curl http://localhost:8000/api/customers
    ```
    """
    return storage.get_customers()


@router.get('/{customer_id}', response_model=CustomerResponse)
async def get_customer(customer_id: str, storage: IStorage = Depends(get_storage)):
    """
    Get a single customer.

    **Errors:**
    - 404 if the customer does not exist
    """
    customer = storage.get_customer(customer_id)

    if not customer:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer {customer_id} not found"
        )

    return customer


@router.get('/{customer_id}/jobs', response_model=List[JobResponse])
async def list_customer_jobs(customer_id: str, storage: IStorage = Depends(get_storage)):
    """
    List the jobs booked for a customer, earliest scheduled first.

    An unknown customer simply has no jobs.
    """
    return storage.get_jobs_by_customer(customer_id)


@router.post('', response_model=CustomerResponse, status_code=status.HTTP_201_CREATED)
async def create_customer(
    data: CustomerCreateRequest,
    storage: IStorage = Depends(get_storage),
    current_user: str = Depends(get_current_user)
):
    """
    Create a customer.

    **Errors:**
    - 400 if a field is missing or invalid
    """
    customer = storage.create_customer(data)
    logger.info(f"Customer {customer.id} ({customer.company_name}) created by {current_user}")
    return customer


@router.put('/{customer_id}', response_model=CustomerResponse)
async def update_customer(
    customer_id: str,
    data: CustomerUpdateRequest,
    storage: IStorage = Depends(get_storage),
    current_user: str = Depends(get_current_user)
):
    """
    Update a customer; only the fields present in the body change.

    **Errors:**
    - 400 if a field is invalid
    - 404 if the customer does not exist
    """
    customer = storage.update_customer(customer_id, data)
    logger.info(f"Customer {customer_id} updated by {current_user}")
    return customer


@router.delete('/{customer_id}', response_model=SuccessResponse)
async def delete_customer(
    customer_id: str,
    storage: IStorage = Depends(get_storage),
    current_user: str = Depends(get_current_user)
):
    """
    Delete a customer.

    **Errors:**
    - 400 if the customer still has jobs
    - 404 if the customer does not exist
    """
    if not storage.delete_customer(customer_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Customer {customer_id} not found"
        )

    logger.info(f"Customer {customer_id} deleted by {current_user}")
    return SuccessResponse(message=f"Customer {customer_id} deleted successfully")
