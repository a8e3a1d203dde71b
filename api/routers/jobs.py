"""
Jobs router - CRUD operations for scheduled service jobs.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from api.dependencies import get_current_user, get_storage
from api.schemas.common import SuccessResponse
from api.schemas.job_schema import JobCreateRequest, JobResponse, JobUpdateRequest
from services.storage_service import IStorage

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(prefix='/jobs', tags=['jobs'])


@router.get('', response_model=List[JobResponse])
async def list_jobs(storage: IStorage = Depends(get_storage)):
    """
    List all jobs ordered by scheduled date, then creation time.

    **Example:**
    ```bash
    curl http://localhost:8000/api/jobs
    ```
    """
    return storage.get_jobs()


@router.get('/{job_id}', response_model=JobResponse)
async def get_job(job_id: str, storage: IStorage = Depends(get_storage)):
    """Get a single job."""
    job = storage.get_job(job_id)

    if not job:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job {job_id} not found"
        )

    return job


@router.post('', response_model=JobResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    data: JobCreateRequest,
    storage: IStorage = Depends(get_storage),
    current_user: str = Depends(get_current_user)
):
    """
    Create a job for an existing customer.

    **Errors:**
    - 400 if a field is invalid or the customer does not exist
    """
    job = storage.create_job(data)
    logger.info(f"Job {job.id} ({job.title}) created by {current_user}")
    return job


@router.put('/{job_id}', response_model=JobResponse)
async def update_job(
    job_id: str,
    data: JobUpdateRequest,
    storage: IStorage = Depends(get_storage),
    current_user: str = Depends(get_current_user)
):
    """
    Update a job; only the fields present in the body change.

    **Errors:**
    - 400 if a field is invalid
    - 404 if the job does not exist
    """
    job = storage.update_job(job_id, data)
    logger.info(f"Job {job_id} updated by {current_user}")
    return job


@router.delete('/{job_id}', response_model=SuccessResponse)
async def delete_job(
    job_id: str,
    storage: IStorage = Depends(get_storage),
    current_user: str = Depends(get_current_user)
):
    """
    Delete a job.

    **Errors:**
    - 404 if the job does not exist
    """
    if not storage.delete_job(job_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Job {job_id} not found"
        )

    logger.info(f"Job {job_id} deleted by {current_user}")
    return SuccessResponse(message=f"Job {job_id} deleted successfully")
