"""
Template Service - Sample import workbooks.

Builds the downloadable "Customers" and "Jobs" templates. Each template
holds a header row and three sample rows in exactly the column layout
that ExcelImportService reads.
"""

import logging
from datetime import date
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font

from services.errors import ValidationError
from services.excel_import_service import CUSTOMERS_SHEET, JOBS_SHEET

logger = logging.getLogger(__name__)

XLSX_MEDIA_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

CUSTOMER_HEADERS = [
    'Company Name', 'Contact Person', 'Email', 'Phone', 'Address', 'Customer Type'
]

JOB_HEADERS = [
    'Customer Name', 'Job Title', 'Description', 'Job Type', 'Scheduled Date',
    'Scheduled Time', 'Duration (min)', 'Customer Email', 'Customer Phone',
    'Customer Address', 'Price', 'Notes'
]

CUSTOMER_SAMPLES = [
    ['ABC Fire Safety', 'John Smith', 'john@abcfire.com', '555-0123',
     '123 Main St, City, ST 12345', 'Commercial'],
    ['XYZ Restaurant', 'Jane Doe', 'jane@xyzrest.com', '555-0456',
     '456 Oak Ave, City, ST 12345', 'Commercial'],
    ['Home Owner', 'Bob Johnson', 'bob@email.com', '555-0789',
     '789 Pine Rd, City, ST 12345', 'Residential'],
]

JOB_SAMPLES = [
    ['ABC Fire Safety', 'Annual Inspection', 'Regular fire alarm system inspection',
     'Inspection', date(2024, 8, 20), '09:00', 60, 'john@abcfire.com', '555-0123',
     '123 Main St, City, ST 12345', 150, 'Contact before arrival'],
    ['XYZ Restaurant', 'System Installation', 'Install new fire suppression system',
     'Installation', date(2024, 8, 22), '10:00', 180, 'jane@xyzrest.com', '555-0456',
     '456 Oak Ave, City, ST 12345', 2500, 'Large commercial kitchen'],
    ['Home Owner', 'Detector Maintenance', 'Replace smoke detector batteries',
     'Maintenance', date(2024, 8, 25), '14:00', 30, 'bob@email.com', '555-0789',
     '789 Pine Rd, City, ST 12345', 75, 'Residential service'],
]

TEMPLATES = {
    'customers': (CUSTOMERS_SHEET, CUSTOMER_HEADERS, CUSTOMER_SAMPLES),
    'jobs': (JOBS_SHEET, JOB_HEADERS, JOB_SAMPLES),
}


class TemplateService:
    """Generates import template workbooks with openpyxl."""

    @staticmethod
    def template_types():
        return list(TEMPLATES)

    @staticmethod
    def filename(template_type: str) -> str:
        return f"{template_type}_template.xlsx"

    def build(self, template_type: str) -> bytes:
        """
        Build a template workbook.

        Args:
            template_type: 'customers' or 'jobs'

        Returns:
            The .xlsx file contents

        Raises:
            ValidationError: If the template type is unknown
        """
        if template_type not in TEMPLATES:
            raise ValidationError(f"Invalid template type '{template_type}'")

        sheet_name, headers, samples = TEMPLATES[template_type]

        workbook = Workbook()
        sheet = workbook.active
        sheet.title = sheet_name
        sheet.append(headers)
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        for row in samples:
            sheet.append(row)

        for column_cells in sheet.columns:
            width = max(len(str(cell.value or '')) for cell in column_cells)
            sheet.column_dimensions[column_cells[0].column_letter].width = width + 2

        buffer = BytesIO()
        workbook.save(buffer)
        logger.info(f"Generated {template_type} template ({len(samples)} sample rows)")
        return buffer.getvalue()
