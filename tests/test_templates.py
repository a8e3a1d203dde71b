"""
Tests for import templates and sample data.
"""

from io import BytesIO

import pytest
from openpyxl import load_workbook

from services.errors import ValidationError
from services.excel_import_service import ExcelImportService
from services.seed_service import seed_sample_data
from services.template_service import CUSTOMER_HEADERS, JOB_HEADERS, TemplateService


class TestTemplateService:
    """Test template generation."""

    def test_customers_template(self):
        workbook = load_workbook(BytesIO(TemplateService().build('customers')))

        assert workbook.sheetnames == ['Customers']
        rows = list(workbook['Customers'].iter_rows(values_only=True))
        assert list(rows[0]) == CUSTOMER_HEADERS
        assert len(rows) == 4

    def test_jobs_template(self):
        workbook = load_workbook(BytesIO(TemplateService().build('jobs')))

        assert workbook.sheetnames == ['Jobs']
        rows = list(workbook['Jobs'].iter_rows(values_only=True))
        assert list(rows[0]) == JOB_HEADERS
        assert len(rows) == 4

    def test_unknown_template(self):
        with pytest.raises(ValidationError):
            TemplateService().build('invoices')

    def test_jobs_template_imports_cleanly(self, storage, clock):
        """The template layout is exactly what the importer reads."""
        content = TemplateService().build('jobs')

        result = ExcelImportService(storage, clock=clock).import_workbook(content, 'jobs_template.xlsx')

        assert result.jobs_created == 3
        assert result.customers_created == 3
        assert result.skipped_rows == []
        titles = [job.title for job in storage.get_jobs()]
        assert titles == ['Annual Inspection', 'System Installation', 'Detector Maintenance']

    def test_customers_template_imports_cleanly(self, storage, clock):
        content = TemplateService().build('customers')

        result = ExcelImportService(storage, clock=clock).import_workbook(content)

        assert result.customers_created == 3
        types = sorted(c.customer_type for c in storage.get_customers())
        assert types == ['Commercial', 'Commercial', 'Residential']


class TestSeedSampleData:
    """Test demo data seeding."""

    def test_seed(self, storage):
        assert seed_sample_data(storage) == (3, 3)

        assert len(storage.get_customers()) == 3
        statuses = sorted(job.status for job in storage.get_jobs())
        assert statuses == ['Completed', 'In Progress', 'Scheduled']

    def test_seed_is_skipped_when_data_exists(self, storage):
        seed_sample_data(storage)

        assert seed_sample_data(storage) == (0, 0)
        assert len(storage.get_customers()) == 3
