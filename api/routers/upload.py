"""
Upload router - Spreadsheet import and template download.

Uploads are processed within the request on a worker thread; the response
carries the number of customers and jobs created and the rows that were
skipped.
"""

import logging

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from api.config import Settings
from api.dependencies import (
    get_app_settings, get_current_user, get_storage, verify_file_extension, verify_file_size
)
from api.schemas.import_schema import ImportResultResponse, SkippedRowResponse
from services.excel_import_service import ExcelImportService
from services.storage_service import IStorage
from services.template_service import XLSX_MEDIA_TYPE, TemplateService

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=['import'])


@router.post('/upload/excel', response_model=ImportResultResponse)
async def upload_excel_file(
    file: UploadFile = File(..., description="Workbook with 'Customers' and/or 'Jobs' sheets"),
    storage: IStorage = Depends(get_storage),
    config: Settings = Depends(get_app_settings),
    current_user: str = Depends(get_current_user)
):
    """
    Upload a workbook and import its rows.

    **Sheets:**
    - `Customers`: Company Name, Contact Person, Email, Phone, Address, Customer Type
    - `Jobs`: Customer Name, Job Title, Description, Job Type, Scheduled Date,
      Scheduled Time, Duration (min), Customer Email, Customer Phone,
      Customer Address, Price, Notes

    Rows that fail validation are skipped and reported; the rest are kept.
    `customersCreated` also counts customers created for job rows whose
    company was not found.

    **Example:**
    ```bash
    curl -F "file=@import.xlsx" http://localhost:8000/api/upload/excel
    ```

    **Errors:**
    - 400 if the extension is not allowed or the file is not a readable workbook
    - 413 if the file is too large
    """
    logger.info(f"Upload request from {current_user}: {file.filename}")

    verify_file_extension(file.filename, config)

    content = await file.read()
    verify_file_size(len(content), config)

    service = ExcelImportService(storage)
    result = await run_in_threadpool(service.import_workbook, content, file.filename)

    return ImportResultResponse(
        filename=result.filename,
        size=result.size,
        customers_created=result.customers_created,
        jobs_created=result.jobs_created,
        skipped_rows=[
            SkippedRowResponse(sheet=row.sheet, row=row.row, reason=row.reason)
            for row in result.skipped_rows
        ],
        message=f"Imported {result.customers_created} customers and {result.jobs_created} jobs"
    )


@router.get('/download/template/{template_type}')
async def download_template(template_type: str):
    """
    Download an import template.

    **Path Parameters:**
    - `template_type`: `customers` or `jobs`

    **Errors:**
    - 400 for any other template type
    """
    service = TemplateService()
    content = service.build(template_type)

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={'Content-Disposition': f'attachment; filename="{service.filename(template_type)}"'}
    )
