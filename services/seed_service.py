"""Demo data for a fresh installation."""

import logging
from datetime import date
from typing import Tuple

from services.storage_service import IStorage

logger = logging.getLogger(__name__)

SAMPLE_CUSTOMERS = [
    {
        'company_name': 'ABC Corporation',
        'contact_person': 'John Manager',
        'email': 'john@abc-corp.com',
        'phone': '(555) 123-4567',
        'address': '123 Business Ave, City, ST 12345',
        'customer_type': 'Commercial',
        'status': 'Active',
        'last_inspection': date(2024, 3, 15),
        'next_due': date(2024, 9, 15),
    },
    {
        'company_name': 'XYZ Manufacturing',
        'contact_person': 'Sarah Wilson',
        'email': 'sarah@xyz-mfg.com',
        'phone': '(555) 234-5678',
        'address': '456 Industrial Rd, City, ST 12345',
        'customer_type': 'Industrial',
        'status': 'Active',
        'last_inspection': date(2024, 4, 2),
        'next_due': date(2024, 10, 2),
    },
    {
        'company_name': 'Metropolitan Office Building',
        'contact_person': 'Mike Johnson',
        'email': 'mike@metro-office.com',
        'phone': '(555) 345-6789',
        'address': '789 Downtown St, City, ST 12345',
        'customer_type': 'Commercial',
        'status': 'Active',
        'last_inspection': date(2024, 2, 28),
        'next_due': date(2024, 8, 28),
    },
]

# One job per sample customer, same order
SAMPLE_JOBS = [
    {
        'title': 'Fire Safety Inspection',
        'description': 'Annual fire safety inspection and equipment check',
        'job_type': 'Inspection',
        'status': 'Scheduled',
        'scheduled_date': date(2024, 8, 20),
        'scheduled_time': '10:00',
        'estimated_duration': 120,
        'price': '250.00',
        'notes': 'Include sprinkler system check',
    },
    {
        'title': 'Alarm System Installation',
        'description': 'New fire alarm system installation in warehouse',
        'job_type': 'Installation',
        'status': 'In Progress',
        'scheduled_date': date(2024, 8, 18),
        'scheduled_time': '09:00',
        'estimated_duration': 480,
        'price': '1500.00',
        'notes': 'Industrial grade system required',
    },
    {
        'title': 'Monthly Maintenance',
        'description': 'Routine maintenance of fire safety systems',
        'job_type': 'Maintenance',
        'status': 'Completed',
        'scheduled_date': date(2024, 8, 15),
        'scheduled_time': '14:00',
        'estimated_duration': 90,
        'price': '180.00',
        'notes': 'All systems functioning properly',
    },
]


def seed_sample_data(storage: IStorage) -> Tuple[int, int]:
    """
    Insert the sample customers and jobs.

    Does nothing when the store already holds customers.

    Returns:
        (customers created, jobs created)
    """
    if storage.get_customers():
        logger.info("Storage already has customers, skipping sample data")
        return 0, 0

    jobs_created = 0
    for customer_data, job_data in zip(SAMPLE_CUSTOMERS, SAMPLE_JOBS):
        customer = storage.create_customer(customer_data)
        storage.create_job(dict(job_data, customer_id=customer.id))
        jobs_created += 1

    logger.info(f"Seeded {len(SAMPLE_CUSTOMERS)} customers and {jobs_created} jobs")
    return len(SAMPLE_CUSTOMERS), jobs_created
