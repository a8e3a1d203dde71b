"""
Pytest configuration and fixtures for storage, importer and API tests.
"""

from datetime import date
from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import Workbook

from api.config import Settings
from api.main import create_app
from services.memory_storage import MemStorage
from services.sql_storage import SqlStorage

# A Wednesday; the weekly window runs Thu 2025-01-09 .. Wed 2025-01-15
FIXED_TODAY = date(2025, 1, 15)

CUSTOMERS_HEADER = ['Company Name', 'Contact Person', 'Email', 'Phone', 'Address', 'Customer Type']
JOBS_HEADER = [
    'Customer Name', 'Job Title', 'Description', 'Job Type', 'Scheduled Date',
    'Scheduled Time', 'Duration (min)', 'Customer Email', 'Customer Phone',
    'Customer Address', 'Price', 'Notes'
]


@pytest.fixture
def today():
    return FIXED_TODAY


@pytest.fixture
def clock():
    """Clock pinned to FIXED_TODAY."""
    return lambda: FIXED_TODAY


@pytest.fixture
def mem_storage(clock):
    return MemStorage(clock=clock)


@pytest.fixture
def sql_storage(clock):
    """SqlStorage on a private in-memory SQLite database."""
    storage = SqlStorage.from_url('sqlite://', clock=clock)
    yield storage
    storage.close()


@pytest.fixture(params=['memory', 'sql'])
def storage(request, clock):
    """Each contract test runs once per storage backend."""
    if request.param == 'memory':
        yield MemStorage(clock=clock)
    else:
        sql = SqlStorage.from_url('sqlite://', clock=clock)
        yield sql
        sql.close()


@pytest.fixture
def customer_data():
    """Valid customer creation fields."""
    return {
        'company_name': 'Acme Co',
        'contact_person': 'Jane',
        'email': 'jane@acme.com',
        'phone': '555-1111',
        'address': '1 Main St',
        'customer_type': 'Commercial',
    }


@pytest.fixture
def make_customer(storage, customer_data):
    """Create a customer in the active storage, overriding any fields."""
    def _make(**overrides):
        return storage.create_customer(dict(customer_data, **overrides))
    return _make


@pytest.fixture
def make_job(storage, today):
    """Create a job in the active storage, overriding any fields."""
    def _make(customer_id, **overrides):
        data = {
            'customer_id': customer_id,
            'title': 'Annual Check',
            'job_type': 'Inspection',
            'scheduled_date': today,
            'scheduled_time': '09:00',
            'estimated_duration': 60,
            'price': '150',
        }
        data.update(overrides)
        return storage.create_job(data)
    return _make


@pytest.fixture
def make_workbook():
    """
    Build .xlsx bytes from {sheet name: [rows]}.

    Sheets named Customers or Jobs get the template header row first.
    """
    def _make(sheets):
        workbook = Workbook()
        workbook.remove(workbook.active)
        for name, rows in sheets.items():
            sheet = workbook.create_sheet(name)
            if name == 'Customers':
                sheet.append(CUSTOMERS_HEADER)
            elif name == 'Jobs':
                sheet.append(JOBS_HEADER)
            for row in rows:
                sheet.append(row)
        buffer = BytesIO()
        workbook.save(buffer)
        return buffer.getvalue()
    return _make


@pytest.fixture
def test_settings(tmp_path):
    return Settings(LOG_FILE=str(tmp_path / 'api.log'), MAX_FILE_SIZE_MB=1)


@pytest.fixture
def client(test_settings, storage):
    """TestClient bound to the parametrised storage backend."""
    app = create_app(settings=test_settings, storage=storage)
    return TestClient(app)
