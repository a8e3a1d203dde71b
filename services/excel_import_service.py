"""
Excel Import Service - Framework-agnostic spreadsheet ingestion.

This module reads an uploaded workbook with up to two named sheets
("Customers" and "Jobs") and writes the rows through the storage
adapter. Columns are mapped by fixed position, not by header name, so
the layout must match the downloadable templates. Malformed rows are
logged and skipped; the import is best effort and never all-or-nothing.
"""

import logging
import zipfile
from xml.etree.ElementTree import ParseError
from dataclasses import asdict, dataclass, field
from datetime import date
from io import BytesIO
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from backend.models.job import JobStatus, JobType
from backend.models.records import CustomerRecord
from backend.models.schema import CustomerStatus, CustomerType
from services.errors import FireOpsError, StoreUnavailable, ValidationError
from services.storage_service import Clock, IStorage
from services.validation_service import (
    cell_at, cell_choice, cell_date, cell_positive_int, cell_text, cell_time,
    trim_row, validate_customer, validate_job
)

logger = logging.getLogger(__name__)

CUSTOMERS_SHEET = 'Customers'
JOBS_SHEET = 'Jobs'

# Column index -> field, "Customers" sheet
CUSTOMER_COLUMNS = {
    'company_name': 0,
    'contact_person': 1,
    'email': 2,
    'phone': 3,
    'address': 4,
    'customer_type': 5,
}
CUSTOMER_MIN_COLUMNS = 4

# Column index -> field, "Jobs" sheet
JOB_COLUMNS = {
    'company_name': 0,
    'title': 1,
    'description': 2,
    'job_type': 3,
    'scheduled_date': 4,
    'scheduled_time': 5,
    'estimated_duration': 6,
    'customer_email': 7,
    'customer_phone': 8,
    'customer_address': 9,
    'price': 10,
    'notes': 11,
}
JOB_MIN_COLUMNS = 6

DEFAULT_CUSTOMER_TYPE = CustomerType.COMMERCIAL.value
DEFAULT_JOB_TYPE = JobType.INSPECTION.value
DEFAULT_SCHEDULED_TIME = '09:00'
DEFAULT_DURATION_MINUTES = 60
DEFAULT_JOB_TITLE = 'Untitled Job'

# Stands in for the customer id while a row for an unknown company is validated
UNRESOLVED_CUSTOMER_ID = 'unresolved'

CUSTOMER_TYPES = [t.value for t in CustomerType]
JOB_TYPES = [t.value for t in JobType]


@dataclass
class SkippedRow:
    """A worksheet row that could not be imported."""

    sheet: str
    row: int
    reason: str


@dataclass
class ImportResult:
    """Counters and diagnostics for one workbook import."""

    filename: str
    size: int
    customers_created: int = 0
    jobs_created: int = 0
    skipped_rows: List[SkippedRow] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _optional_text(value: Any) -> Optional[str]:
    text = cell_text(value)
    return text or None


class ExcelImportService:
    """
    Framework-agnostic spreadsheet import service.

    Resolves or creates customers, creates jobs, and reports how many
    records were created.
    """

    def __init__(
        self,
        storage: IStorage,
        progress_callback: Optional[Callable[[str, float, str], None]] = None,
        clock: Optional[Clock] = None
    ):
        """
        Initialize spreadsheet import service.

        Args:
            storage: Storage adapter receiving the records
            progress_callback: Optional callback for progress updates
                              Signature: callback(stage: str, percent: float, message: str)
            clock: Callable returning today's date, used for missing job dates
        """
        self.storage = storage
        self.progress_callback = progress_callback or (lambda *args: None)
        self.clock = clock or date.today

    def _emit_progress(self, stage: str, percent: float, message: str):
        """Emit progress update via callback."""
        self.progress_callback(stage, percent, message)
        logger.info(f"Progress: {stage} ({percent:.1f}%) - {message}")

    def _skip(self, result: ImportResult, sheet: str, row_num: int, error: Exception):
        logger.warning(f"Skipped invalid {sheet} row {row_num}: {error}")
        result.skipped_rows.append(SkippedRow(sheet=sheet, row=row_num, reason=str(error)))

    # ------------------------------------------------------------------
    # Workbook access
    # ------------------------------------------------------------------

    def load_workbook(self, content: bytes):
        """
        Open workbook bytes read-only with cached cell values.

        Raises:
            ValidationError: If the payload is not a readable workbook
        """
        try:
            return openpyxl.load_workbook(BytesIO(content), read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, ParseError, KeyError, OSError) as e:
            raise ValidationError(f"Could not read workbook: {e}") from e

    def read_sheet(self, workbook, sheet_name: str) -> List[tuple]:
        """
        Read a sheet as (row_number, cells) pairs, header row excluded.

        Trailing empty cells are trimmed so the cell count reflects the
        populated width of the row. Sheets are parsed lazily, so corrupt
        sheet XML only surfaces here.

        Raises:
            ValidationError: If the sheet cannot be parsed
        """
        worksheet = workbook[sheet_name]
        rows = []
        try:
            for row_num, values in enumerate(worksheet.iter_rows(values_only=True), 1):
                if row_num == 1:
                    continue
                rows.append((row_num, trim_row(values)))
        except (ParseError, zipfile.BadZipFile) as e:
            raise ValidationError(f"Could not read workbook sheet '{sheet_name}': {e}") from e
        logger.info(f"Read {len(rows)} data rows from sheet '{sheet_name}'")
        return rows

    # ------------------------------------------------------------------
    # Row mapping
    # ------------------------------------------------------------------

    @staticmethod
    def map_customer_row(row: list) -> Dict[str, Any]:
        """Map a "Customers" row to customer fields."""
        cols = CUSTOMER_COLUMNS
        return {
            'company_name': cell_text(cell_at(row, cols['company_name'])),
            'contact_person': cell_text(cell_at(row, cols['contact_person'])),
            'email': cell_text(cell_at(row, cols['email'])),
            'phone': cell_text(cell_at(row, cols['phone'])),
            'address': cell_text(cell_at(row, cols['address'])),
            'customer_type': cell_choice(
                cell_at(row, cols['customer_type']), CUSTOMER_TYPES, DEFAULT_CUSTOMER_TYPE
            ),
            'status': CustomerStatus.ACTIVE.value,
        }

    @staticmethod
    def map_fallback_customer(row: list) -> Dict[str, Any]:
        """Customer fields built from the contact columns of a "Jobs" row."""
        cols = JOB_COLUMNS
        company_name = cell_text(cell_at(row, cols['company_name']))
        return {
            'company_name': company_name,
            'contact_person': company_name,
            'email': cell_text(cell_at(row, cols['customer_email'])),
            'phone': cell_text(cell_at(row, cols['customer_phone'])),
            'address': cell_text(cell_at(row, cols['customer_address'])),
            'customer_type': DEFAULT_CUSTOMER_TYPE,
            'status': CustomerStatus.ACTIVE.value,
        }

    def map_job_row(self, row: list, customer_id: str) -> Dict[str, Any]:
        """Map a "Jobs" row to job fields for the given customer."""
        cols = JOB_COLUMNS
        return {
            'customer_id': customer_id,
            'title': cell_text(cell_at(row, cols['title']), DEFAULT_JOB_TITLE),
            'description': _optional_text(cell_at(row, cols['description'])),
            'job_type': cell_choice(cell_at(row, cols['job_type']), JOB_TYPES, DEFAULT_JOB_TYPE),
            'scheduled_date': cell_date(cell_at(row, cols['scheduled_date']), self.clock()),
            'scheduled_time': cell_time(
                cell_at(row, cols['scheduled_time']), DEFAULT_SCHEDULED_TIME
            ),
            'estimated_duration': cell_positive_int(
                cell_at(row, cols['estimated_duration']), DEFAULT_DURATION_MINUTES
            ),
            'price': _optional_text(cell_at(row, cols['price'])),
            'status': JobStatus.SCHEDULED.value,
            'notes': _optional_text(cell_at(row, cols['notes'])),
        }

    # ------------------------------------------------------------------
    # Sheet processing
    # ------------------------------------------------------------------

    def import_customers(self, workbook, result: ImportResult):
        """Create one customer per eligible "Customers" row."""
        for row_num, row in self.read_sheet(workbook, CUSTOMERS_SHEET):
            if len(row) < CUSTOMER_MIN_COLUMNS or not cell_text(cell_at(row, 0)):
                continue

            try:
                data = validate_customer(self.map_customer_row(row))
                self.storage.create_customer(data)
                result.customers_created += 1
            except StoreUnavailable:
                raise
            except (FireOpsError, ValueError, TypeError) as e:
                self._skip(result, CUSTOMERS_SHEET, row_num, e)

    def import_jobs(self, workbook, result: ImportResult):
        """
        Create one job per eligible "Jobs" row.

        Customers are matched by case-insensitive company name against a
        snapshot taken once at the start of the sheet. A row for an unknown
        company is validated first; only then is a customer created from its
        contact columns, appended to the snapshot and counted in
        customers_created.
        """
        customers: List[CustomerRecord] = self.storage.get_customers()

        for row_num, row in self.read_sheet(workbook, JOBS_SHEET):
            company_name = cell_text(cell_at(row, JOB_COLUMNS['company_name']))
            title = cell_text(cell_at(row, JOB_COLUMNS['title']))
            if len(row) < JOB_MIN_COLUMNS or not company_name or not title:
                continue

            try:
                customer = self._find_customer(customers, company_name)
                data = validate_job(self.map_job_row(
                    row, customer.id if customer else UNRESOLVED_CUSTOMER_ID
                ))

                if customer is None:
                    customer = self.storage.create_customer(
                        validate_customer(self.map_fallback_customer(row))
                    )
                    customers.append(customer)
                    result.customers_created += 1
                    logger.info(f"Created customer '{company_name}' from Jobs row {row_num}")
                    data = data.model_copy(update={'customer_id': customer.id})

                self.storage.create_job(data)
                result.jobs_created += 1
            except StoreUnavailable:
                raise
            except (FireOpsError, ValueError, TypeError) as e:
                self._skip(result, JOBS_SHEET, row_num, e)

    @staticmethod
    def _find_customer(customers: List[CustomerRecord], company_name: str) -> Optional[CustomerRecord]:
        wanted = company_name.lower()
        for customer in customers:
            if customer.company_name.lower() == wanted:
                return customer
        return None

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def import_workbook(self, content: bytes, filename: str = 'upload.xlsx') -> ImportResult:
        """
        Main import workflow.

        Args:
            content: Raw workbook bytes
            filename: Original filename, echoed in the result

        Returns:
            ImportResult with created counters and skipped rows

        Raises:
            ValidationError: If the payload is not a readable workbook
            StoreUnavailable: If the storage backend fails
        """
        logger.info(f"Starting import of {filename} ({len(content)} bytes)")
        result = ImportResult(filename=filename, size=len(content))

        self._emit_progress('parsing', 5, 'Opening workbook...')
        workbook = self.load_workbook(content)

        try:
            sheet_names = workbook.sheetnames

            if CUSTOMERS_SHEET in sheet_names:
                self._emit_progress('customers', 20, 'Importing customers...')
                self.import_customers(workbook, result)

            if JOBS_SHEET in sheet_names:
                self._emit_progress('jobs', 60, 'Importing jobs...')
                self.import_jobs(workbook, result)

            if CUSTOMERS_SHEET not in sheet_names and JOBS_SHEET not in sheet_names:
                logger.info(f"No '{CUSTOMERS_SHEET}' or '{JOBS_SHEET}' sheet in {filename}")
        finally:
            workbook.close()

        self._emit_progress('complete', 100, 'Import complete')
        logger.info(
            f"Import of {filename} finished: {result.customers_created} customers, "
            f"{result.jobs_created} jobs, {len(result.skipped_rows)} rows skipped"
        )
        return result

    def import_file(self, file_path: str) -> ImportResult:
        """Import a workbook from disk."""
        path = Path(file_path)
        return self.import_workbook(path.read_bytes(), path.name)
