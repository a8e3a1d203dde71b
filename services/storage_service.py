"""
Storage Service - Record storage and dashboard aggregation contract.

This module defines the capability interface implemented by the
in-memory and SQL storage backends, and the factory that selects one
at application startup.
"""

import logging
from datetime import date
from typing import Callable, List, Optional, Protocol, Union, runtime_checkable

from backend.models.records import (
    CustomerCreate, CustomerRecord, CustomerUpdate, JobCreate, JobRecord, JobUpdate
)
from backend.models.reports import (
    CustomerTypeDistribution, DashboardStats, JobStatusDistribution,
    MonthlyTrend, RevenueByJobType, WeeklyJobsData
)

logger = logging.getLogger(__name__)

STORAGE_BACKENDS = ('memory', 'sql')

Clock = Callable[[], date]


@runtime_checkable
class IStorage(Protocol):
    """
    Uniform CRUD and aggregate reads over customers and jobs.

    Both implementations share these semantics:

    - get_customers: newest first (created_at descending)
    - get_jobs / get_jobs_by_customer: scheduled_date ascending, then
      created_at ascending
    - update_*: raises NotFoundError when the id is absent
    - delete_*: returns False when the id is absent
    - monthly aggregates anchor on scheduled_date and use the storage
      clock for "today"
    """

    # Customer operations
    def get_customers(self) -> List[CustomerRecord]: ...

    def get_customer(self, customer_id: str) -> Optional[CustomerRecord]: ...

    def create_customer(self, data: Union[CustomerCreate, dict]) -> CustomerRecord: ...

    def update_customer(self, customer_id: str,
                        data: Union[CustomerUpdate, dict]) -> CustomerRecord: ...

    def delete_customer(self, customer_id: str) -> bool: ...

    # Job operations
    def get_jobs(self) -> List[JobRecord]: ...

    def get_job(self, job_id: str) -> Optional[JobRecord]: ...

    def get_jobs_by_customer(self, customer_id: str) -> List[JobRecord]: ...

    def create_job(self, data: Union[JobCreate, dict]) -> JobRecord: ...

    def update_job(self, job_id: str, data: Union[JobUpdate, dict]) -> JobRecord: ...

    def delete_job(self, job_id: str) -> bool: ...

    # Dashboard statistics
    def get_dashboard_stats(self) -> DashboardStats: ...

    def get_job_status_distribution(self) -> List[JobStatusDistribution]: ...

    def get_customer_type_distribution(self) -> List[CustomerTypeDistribution]: ...

    def get_monthly_trends(self) -> List[MonthlyTrend]: ...

    def get_weekly_jobs_data(self) -> List[WeeklyJobsData]: ...

    def get_revenue_by_job_type(self) -> List[RevenueByJobType]: ...

    def close(self) -> None: ...


def create_storage(
    backend: str,
    database_url: Optional[str] = None,
    pool_pre_ping: bool = True,
    echo: bool = False,
    clock: Optional[Clock] = None
) -> IStorage:
    """
    Build the storage backend named by configuration.

    Args:
        backend: 'memory' or 'sql'
        database_url: SQLAlchemy URL (required for 'sql')
        pool_pre_ping: Test pooled connections before use
        echo: Log emitted SQL
        clock: Callable returning today's date (default: date.today)

    Returns:
        Storage instance implementing IStorage

    Raises:
        ValueError: If the backend name is unknown or the URL is missing
    """
    backend = (backend or '').lower()

    if backend == 'memory':
        from services.memory_storage import MemStorage
        logger.info("Using in-memory storage")
        return MemStorage(clock=clock)

    if backend == 'sql':
        if not database_url:
            raise ValueError("DATABASE_URL is required for the sql storage backend")
        from services.sql_storage import SqlStorage
        logger.info(f"Using SQL storage: {database_url.split('@')[-1]}")  # Hide credentials
        return SqlStorage.from_url(
            database_url, pool_pre_ping=pool_pre_ping, echo=echo, clock=clock
        )

    raise ValueError(
        f"Unknown storage backend '{backend}'. Expected one of: {', '.join(STORAGE_BACKENDS)}"
    )
