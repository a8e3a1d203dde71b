"""
SQL storage backend.

Implements IStorage on top of SQLAlchemy. Each operation runs in its own
session and commits on its own; there are no multi-statement transactions
spanning several operations.
"""

import logging
from contextlib import contextmanager
from datetime import date
from decimal import Decimal
from typing import Dict, Iterator, List, Optional, Tuple

from sqlalchemy import case, create_engine, event, extract, func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DataError, IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from backend.models.job import Job, JobStatus, JobType
from backend.models.records import CustomerRecord, JobRecord
from backend.models.reports import (
    CustomerTypeDistribution, DashboardStats, JobStatusDistribution,
    MonthlyTrend, RevenueByJobType, WeeklyJobsData
)
from backend.models.schema import Base, Customer
from services import reporting
from services.errors import NotFoundError, StoreUnavailable, ValidationError
from services.storage_service import Clock
from services.validation_service import (
    validate_customer, validate_customer_update, validate_job, validate_job_update
)

logger = logging.getLogger(__name__)

COMPLETED = JobStatus.COMPLETED.value


def _column_values(fields: Dict) -> Dict:
    """Convert validated record fields to column values."""
    values = dict(fields)
    if values.get('price') is not None:
        values['price'] = Decimal(values['price'])
    return values


class SqlStorage:
    """SQLAlchemy-backed implementation of IStorage."""

    def __init__(self, engine: Engine, clock: Optional[Clock] = None):
        """
        Initialize SQL storage.

        Args:
            engine: SQLAlchemy engine bound to the target database
            clock: Callable returning today's date (default: date.today)
        """
        self.engine = engine
        self.clock = clock or date.today
        self.SessionLocal = sessionmaker(
            autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
        )

    @classmethod
    def from_url(
        cls,
        database_url: str,
        pool_pre_ping: bool = True,
        echo: bool = False,
        clock: Optional[Clock] = None,
        create_tables: bool = True
    ) -> 'SqlStorage':
        """Create engine, ensure tables exist and return a storage instance."""
        engine_kwargs = {'pool_pre_ping': pool_pre_ping, 'echo': echo}

        if database_url.startswith('sqlite'):
            engine_kwargs['connect_args'] = {'check_same_thread': False}
            if database_url in ('sqlite://', 'sqlite:///:memory:'):
                # One shared connection, otherwise every checkout sees an empty database
                engine_kwargs['poolclass'] = StaticPool

        engine = create_engine(database_url, **engine_kwargs)

        if engine.dialect.name == 'sqlite':
            @event.listens_for(engine, 'connect')
            def _enable_foreign_keys(dbapi_connection, connection_record):
                cursor = dbapi_connection.cursor()
                cursor.execute('PRAGMA foreign_keys=ON')
                cursor.close()

        if create_tables:
            try:
                Base.metadata.create_all(bind=engine)
                logger.info("Database tables verified")
            except SQLAlchemyError as e:
                raise StoreUnavailable(f"Database initialization failed: {e}") from e

        return cls(engine, clock=clock)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Session scope translating driver errors into the service taxonomy."""
        session = self.SessionLocal()
        try:
            yield session
        except IntegrityError as e:
            session.rollback()
            logger.warning(f"Constraint violation: {e.orig}")
            raise ValidationError(f"Constraint violation: {e.orig}") from e
        except DataError as e:
            session.rollback()
            logger.warning(f"Value rejected by database: {e.orig}")
            raise ValidationError(f"Value rejected by database: {e.orig}") from e
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Database operation failed: {e}")
            raise StoreUnavailable(f"Database operation failed: {e}") from e
        finally:
            session.close()

    @staticmethod
    def _require_customer(session: Session, customer_id: str):
        if session.get(Customer, customer_id) is None:
            raise ValidationError(f"Customer {customer_id} does not exist")

    # ------------------------------------------------------------------
    # Customer operations
    # ------------------------------------------------------------------

    def get_customers(self) -> List[CustomerRecord]:
        with self._session() as session:
            rows = session.query(Customer).order_by(Customer.created_at.desc()).all()
            return [CustomerRecord.model_validate(row) for row in rows]

    def get_customer(self, customer_id: str) -> Optional[CustomerRecord]:
        with self._session() as session:
            row = session.get(Customer, customer_id)
            return CustomerRecord.model_validate(row) if row else None

    def create_customer(self, data) -> CustomerRecord:
        fields = validate_customer(data).model_dump()
        with self._session() as session:
            row = Customer(**_column_values(fields))
            session.add(row)
            session.commit()
            logger.debug(f"Created customer {row.id} ({row.company_name})")
            return CustomerRecord.model_validate(row)

    def update_customer(self, customer_id: str, data) -> CustomerRecord:
        changes = validate_customer_update(data).model_dump(exclude_unset=True)
        with self._session() as session:
            row = session.get(Customer, customer_id)
            if row is None:
                raise NotFoundError('Customer', customer_id)
            for key, value in _column_values(changes).items():
                setattr(row, key, value)
            session.commit()
            return CustomerRecord.model_validate(row)

    def delete_customer(self, customer_id: str) -> bool:
        with self._session() as session:
            row = session.get(Customer, customer_id)
            if row is None:
                return False
            has_jobs = session.query(Job.id).filter(Job.customer_id == customer_id).first()
            if has_jobs:
                raise ValidationError(f"Customer {customer_id} still has jobs")
            session.delete(row)
            session.commit()
            return True

    # ------------------------------------------------------------------
    # Job operations
    # ------------------------------------------------------------------

    def get_jobs(self) -> List[JobRecord]:
        with self._session() as session:
            rows = session.query(Job)\
                .order_by(Job.scheduled_date.asc(), Job.created_at.asc())\
                .all()
            return [JobRecord.model_validate(row) for row in rows]

    def get_job(self, job_id: str) -> Optional[JobRecord]:
        with self._session() as session:
            row = session.get(Job, job_id)
            return JobRecord.model_validate(row) if row else None

    def get_jobs_by_customer(self, customer_id: str) -> List[JobRecord]:
        with self._session() as session:
            rows = session.query(Job)\
                .filter(Job.customer_id == customer_id)\
                .order_by(Job.scheduled_date.asc(), Job.created_at.asc())\
                .all()
            return [JobRecord.model_validate(row) for row in rows]

    def create_job(self, data) -> JobRecord:
        fields = validate_job(data).model_dump()
        with self._session() as session:
            self._require_customer(session, fields['customer_id'])
            row = Job(**_column_values(fields))
            session.add(row)
            session.commit()
            logger.debug(f"Created job {row.id} ({row.title}) for customer {row.customer_id}")
            return JobRecord.model_validate(row)

    def update_job(self, job_id: str, data) -> JobRecord:
        changes = validate_job_update(data).model_dump(exclude_unset=True)
        with self._session() as session:
            row = session.get(Job, job_id)
            if row is None:
                raise NotFoundError('Job', job_id)
            if 'customer_id' in changes:
                self._require_customer(session, changes['customer_id'])
            for key, value in _column_values(changes).items():
                setattr(row, key, value)
            session.commit()
            return JobRecord.model_validate(row)

    def delete_job(self, job_id: str) -> bool:
        with self._session() as session:
            deleted = session.query(Job).filter(Job.id == job_id).delete()
            session.commit()
            return deleted > 0

    # ------------------------------------------------------------------
    # Dashboard statistics
    # ------------------------------------------------------------------

    def get_dashboard_stats(self) -> DashboardStats:
        start, end = reporting.month_bounds(self.clock())

        with self._session() as session:
            total_customers = session.query(func.count(Customer.id)).scalar() or 0

            pending_inspections = session.query(func.count(Job.id)).filter(
                Job.status == JobStatus.SCHEDULED.value,
                Job.job_type == JobType.INSPECTION.value
            ).scalar() or 0

            completed_this_month, revenue = session.query(
                func.count(Job.id),
                func.sum(Job.price)
            ).filter(
                Job.status == COMPLETED,
                Job.scheduled_date >= start,
                Job.scheduled_date < end
            ).one()

        return DashboardStats(
            total_customers=total_customers,
            pending_inspections=pending_inspections,
            completed_this_month=completed_this_month or 0,
            monthly_revenue=float(reporting.price_amount(revenue))
        )

    def get_job_status_distribution(self) -> List[JobStatusDistribution]:
        with self._session() as session:
            rows = session.query(Job.status, func.count(Job.id)).group_by(Job.status).all()

        counts = reporting.tally((status, count) for status, count in rows)
        return reporting.build_distribution(
            counts, reporting.status_order(), reporting.STATUS_COLORS, JobStatusDistribution
        )

    def get_customer_type_distribution(self) -> List[CustomerTypeDistribution]:
        with self._session() as session:
            rows = session.query(Customer.customer_type, func.count(Customer.id))\
                .group_by(Customer.customer_type)\
                .all()

        counts = reporting.tally((customer_type, count) for customer_type, count in rows)
        return reporting.build_distribution(
            counts, reporting.customer_type_order(), reporting.CUSTOMER_TYPE_COLORS,
            CustomerTypeDistribution
        )

    def get_monthly_trends(self) -> List[MonthlyTrend]:
        start, end = reporting.year_bounds(self.clock())
        month = extract('month', Job.scheduled_date)
        completed_price = case((Job.status == COMPLETED, Job.price), else_=None)

        with self._session() as session:
            rows = session.query(
                month.label('month'),
                func.count(Job.id),
                func.sum(completed_price)
            ).filter(
                Job.scheduled_date >= start,
                Job.scheduled_date < end
            ).group_by(month).all()

        jobs_by_month: Dict[int, int] = {}
        revenue_by_month: Dict[int, Decimal] = {}
        for month_number, job_count, revenue in rows:
            jobs_by_month[int(month_number)] = job_count
            revenue_by_month[int(month_number)] = reporting.price_amount(revenue)

        return reporting.build_monthly_trends(jobs_by_month, revenue_by_month)

    def get_weekly_jobs_data(self) -> List[WeeklyJobsData]:
        days = reporting.week_window(self.clock())

        with self._session() as session:
            rows = session.query(Job.scheduled_date, Job.job_type, func.count(Job.id))\
                .filter(Job.scheduled_date >= days[0], Job.scheduled_date <= days[-1])\
                .group_by(Job.scheduled_date, Job.job_type)\
                .all()

        counts: Dict[Tuple[date, str], int] = {
            (scheduled_date, job_type): count for scheduled_date, job_type, count in rows
        }
        return reporting.build_weekly_jobs(days, counts)

    def get_revenue_by_job_type(self) -> List[RevenueByJobType]:
        with self._session() as session:
            rows = session.query(Job.job_type, func.sum(Job.price), func.count(Job.id))\
                .filter(Job.status == COMPLETED)\
                .group_by(Job.job_type)\
                .all()

        totals = {
            job_type: (reporting.price_amount(revenue), count)
            for job_type, revenue, count in rows
        }
        return reporting.build_revenue_by_job_type(totals)

    def close(self) -> None:
        """Dispose of the engine's connection pool."""
        self.engine.dispose()
        logger.info("Database connections closed")
