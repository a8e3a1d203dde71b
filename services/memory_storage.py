"""
In-memory storage backend.

Keeps customers and jobs in plain dictionaries for the lifetime of the
process. There is no cross-request isolation and no locking.
"""

import itertools
import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from backend.models.job import JobStatus, JobType
from backend.models.records import CustomerRecord, JobRecord
from backend.models.reports import (
    CustomerTypeDistribution, DashboardStats, JobStatusDistribution,
    MonthlyTrend, RevenueByJobType, WeeklyJobsData
)
from backend.models.schema import generate_id
from services import reporting
from services.errors import NotFoundError, ValidationError
from services.storage_service import Clock
from services.validation_service import (
    validate_customer, validate_customer_update, validate_job, validate_job_update
)

logger = logging.getLogger(__name__)


class MemStorage:
    """Dictionary-backed implementation of IStorage."""

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or date.today
        self._customers: Dict[str, CustomerRecord] = {}
        self._jobs: Dict[str, JobRecord] = {}
        # Insertion sequence breaks created_at ties
        self._sequence = itertools.count()
        self._inserted: Dict[str, int] = {}

    def _stamp(self, record_id: str):
        self._inserted[record_id] = next(self._sequence)

    def _job_sort_key(self, job: JobRecord):
        return (job.scheduled_date, job.created_at, self._inserted.get(job.id, 0))

    def _require_customer(self, customer_id: str):
        if customer_id not in self._customers:
            raise ValidationError(f"Customer {customer_id} does not exist")

    # ------------------------------------------------------------------
    # Customer operations
    # ------------------------------------------------------------------

    def get_customers(self) -> List[CustomerRecord]:
        customers = sorted(
            self._customers.values(),
            key=lambda c: (c.created_at, self._inserted.get(c.id, 0)),
            reverse=True
        )
        return [c.model_copy() for c in customers]

    def get_customer(self, customer_id: str) -> Optional[CustomerRecord]:
        customer = self._customers.get(customer_id)
        return customer.model_copy() if customer else None

    def create_customer(self, data) -> CustomerRecord:
        fields = validate_customer(data).model_dump()
        customer = CustomerRecord(id=generate_id(), created_at=datetime.utcnow(), **fields)
        self._customers[customer.id] = customer
        self._stamp(customer.id)
        logger.debug(f"Created customer {customer.id} ({customer.company_name})")
        return customer.model_copy()

    def update_customer(self, customer_id: str, data) -> CustomerRecord:
        changes = validate_customer_update(data).model_dump(exclude_unset=True)
        existing = self._customers.get(customer_id)
        if existing is None:
            raise NotFoundError('Customer', customer_id)
        updated = existing.model_copy(update=changes)
        self._customers[customer_id] = updated
        return updated.model_copy()

    def delete_customer(self, customer_id: str) -> bool:
        if customer_id not in self._customers:
            return False
        if any(job.customer_id == customer_id for job in self._jobs.values()):
            raise ValidationError(f"Customer {customer_id} still has jobs")
        del self._customers[customer_id]
        self._inserted.pop(customer_id, None)
        return True

    # ------------------------------------------------------------------
    # Job operations
    # ------------------------------------------------------------------

    def get_jobs(self) -> List[JobRecord]:
        return [j.model_copy() for j in sorted(self._jobs.values(), key=self._job_sort_key)]

    def get_job(self, job_id: str) -> Optional[JobRecord]:
        job = self._jobs.get(job_id)
        return job.model_copy() if job else None

    def get_jobs_by_customer(self, customer_id: str) -> List[JobRecord]:
        jobs = [j for j in self._jobs.values() if j.customer_id == customer_id]
        return [j.model_copy() for j in sorted(jobs, key=self._job_sort_key)]

    def create_job(self, data) -> JobRecord:
        fields = validate_job(data).model_dump()
        self._require_customer(fields['customer_id'])
        job = JobRecord(id=generate_id(), created_at=datetime.utcnow(), **fields)
        self._jobs[job.id] = job
        self._stamp(job.id)
        logger.debug(f"Created job {job.id} ({job.title}) for customer {job.customer_id}")
        return job.model_copy()

    def update_job(self, job_id: str, data) -> JobRecord:
        changes = validate_job_update(data).model_dump(exclude_unset=True)
        existing = self._jobs.get(job_id)
        if existing is None:
            raise NotFoundError('Job', job_id)
        if 'customer_id' in changes:
            self._require_customer(changes['customer_id'])
        updated = existing.model_copy(update=changes)
        self._jobs[job_id] = updated
        return updated.model_copy()

    def delete_job(self, job_id: str) -> bool:
        if self._jobs.pop(job_id, None) is None:
            return False
        self._inserted.pop(job_id, None)
        return True

    # ------------------------------------------------------------------
    # Dashboard statistics
    # ------------------------------------------------------------------

    def get_dashboard_stats(self) -> DashboardStats:
        jobs = list(self._jobs.values())
        start, end = reporting.month_bounds(self.clock())

        completed_this_month = [
            job for job in jobs
            if job.status == JobStatus.COMPLETED and start <= job.scheduled_date < end
        ]
        revenue = sum((reporting.price_amount(job.price) for job in completed_this_month),
                      Decimal(0))

        return DashboardStats(
            total_customers=len(self._customers),
            pending_inspections=sum(
                1 for job in jobs
                if job.job_type == JobType.INSPECTION and job.status == JobStatus.SCHEDULED
            ),
            completed_this_month=len(completed_this_month),
            monthly_revenue=float(revenue)
        )

    def get_job_status_distribution(self) -> List[JobStatusDistribution]:
        counts = reporting.tally((job.status, 1) for job in self._jobs.values())
        return reporting.build_distribution(
            counts, reporting.status_order(), reporting.STATUS_COLORS, JobStatusDistribution
        )

    def get_customer_type_distribution(self) -> List[CustomerTypeDistribution]:
        counts = reporting.tally((c.customer_type, 1) for c in self._customers.values())
        return reporting.build_distribution(
            counts, reporting.customer_type_order(), reporting.CUSTOMER_TYPE_COLORS,
            CustomerTypeDistribution
        )

    def get_monthly_trends(self) -> List[MonthlyTrend]:
        start, end = reporting.year_bounds(self.clock())
        jobs_by_month: Dict[int, int] = {}
        revenue_by_month: Dict[int, Decimal] = {}

        for job in self._jobs.values():
            if not start <= job.scheduled_date < end:
                continue
            month = job.scheduled_date.month
            jobs_by_month[month] = jobs_by_month.get(month, 0) + 1
            if job.status == JobStatus.COMPLETED:
                revenue_by_month[month] = (
                    revenue_by_month.get(month, Decimal(0)) + reporting.price_amount(job.price)
                )

        return reporting.build_monthly_trends(jobs_by_month, revenue_by_month)

    def get_weekly_jobs_data(self) -> List[WeeklyJobsData]:
        days = reporting.week_window(self.clock())
        window = set(days)
        counts: Dict[Tuple[date, str], int] = {}

        for job in self._jobs.values():
            if job.scheduled_date in window:
                key = (job.scheduled_date, job.job_type)
                counts[key] = counts.get(key, 0) + 1

        return reporting.build_weekly_jobs(days, counts)

    def get_revenue_by_job_type(self) -> List[RevenueByJobType]:
        totals: Dict[str, Tuple[Decimal, int]] = {}

        for job in self._jobs.values():
            if job.status != JobStatus.COMPLETED:
                continue
            revenue, count = totals.get(job.job_type, (Decimal(0), 0))
            totals[job.job_type] = (revenue + reporting.price_amount(job.price), count + 1)

        return reporting.build_revenue_by_job_type(totals)

    def close(self) -> None:
        """Nothing to release for the in-memory backend."""
