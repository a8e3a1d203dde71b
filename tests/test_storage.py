"""
Contract tests for the storage backends.

Every test here runs against both MemStorage and SqlStorage through the
parametrised `storage` fixture.
"""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy.exc import DataError, OperationalError

from services.errors import NotFoundError, StoreUnavailable, ValidationError
from services.memory_storage import MemStorage
from services.sql_storage import SqlStorage
from services.storage_service import IStorage, create_storage


class TestCreateStorage:
    """Test backend selection."""

    def test_memory_backend(self):
        storage = create_storage('memory')
        assert isinstance(storage, MemStorage)
        assert isinstance(storage, IStorage)

    def test_sql_backend(self):
        storage = create_storage('sql', database_url='sqlite://')
        try:
            assert isinstance(storage, SqlStorage)
            assert isinstance(storage, IStorage)
        finally:
            storage.close()

    def test_sql_backend_requires_url(self):
        with pytest.raises(ValueError):
            create_storage('sql')

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match='Unknown storage backend'):
            create_storage('mongo')


class TestCustomers:
    """Test customer CRUD."""

    def test_create_then_get_round_trip(self, storage, customer_data):
        """A created customer reads back with an id and creation timestamp."""
        before = datetime.utcnow() - timedelta(seconds=1)

        created = storage.create_customer(customer_data)
        fetched = storage.get_customer(created.id)

        assert created.id
        assert fetched is not None
        assert fetched.created_at >= before
        for key, value in customer_data.items():
            assert getattr(fetched, key) == value
        assert fetched.status == 'Active'
        assert fetched.last_inspection is None

    def test_get_missing_customer_returns_none(self, storage):
        assert storage.get_customer('missing') is None

    def test_list_is_newest_first(self, storage, make_customer):
        first = make_customer(company_name='First')
        second = make_customer(company_name='Second')

        ids = [c.id for c in storage.get_customers()]

        assert ids == [second.id, first.id]

    def test_create_rejects_missing_company_name(self, storage, customer_data):
        customer_data['company_name'] = ''
        with pytest.raises(ValidationError):
            storage.create_customer(customer_data)

    def test_create_rejects_unknown_customer_type(self, storage, customer_data):
        customer_data['customer_type'] = 'Government'
        with pytest.raises(ValidationError) as exc_info:
            storage.create_customer(customer_data)
        assert exc_info.value.errors

    def test_update_changes_only_given_fields(self, storage, make_customer):
        customer = make_customer()

        updated = storage.update_customer(
            customer.id, {'status': 'Inactive', 'next_due': date(2025, 3, 1)}
        )

        assert updated.status == 'Inactive'
        assert updated.next_due == date(2025, 3, 1)
        assert updated.company_name == customer.company_name
        assert storage.get_customer(customer.id).status == 'Inactive'

    def test_update_rejects_null_required_field(self, storage, make_customer):
        customer = make_customer()
        with pytest.raises(ValidationError):
            storage.update_customer(customer.id, {'company_name': None})

    def test_update_missing_customer_raises_not_found(self, storage):
        with pytest.raises(NotFoundError):
            storage.update_customer('missing', {'status': 'Inactive'})

    def test_delete_missing_customer_returns_false(self, storage):
        assert storage.delete_customer('missing') is False

    def test_delete_customer(self, storage, make_customer):
        customer = make_customer()

        assert storage.delete_customer(customer.id) is True
        assert storage.get_customer(customer.id) is None

    def test_delete_customer_with_jobs_is_rejected(self, storage, make_customer, make_job):
        customer = make_customer()
        make_job(customer.id)

        with pytest.raises(ValidationError):
            storage.delete_customer(customer.id)
        assert storage.get_customer(customer.id) is not None


class TestJobs:
    """Test job CRUD."""

    def test_create_job_defaults(self, storage, make_customer, make_job, today):
        customer = make_customer()

        job = make_job(customer.id)

        assert job.id
        assert job.status == 'Scheduled'
        assert job.scheduled_date == today
        assert job.price == '150'
        assert storage.get_job(job.id).title == 'Annual Check'

    def test_create_job_for_missing_customer(self, storage, make_job):
        with pytest.raises(ValidationError):
            make_job('missing')

    def test_create_job_rejects_bad_price(self, storage, make_customer, make_job):
        customer = make_customer()
        with pytest.raises(ValidationError):
            make_job(customer.id, price='abc')

    def test_create_job_rejects_unknown_job_type(self, storage, make_customer, make_job):
        customer = make_customer()
        with pytest.raises(ValidationError):
            make_job(customer.id, job_type='Demolition')

    @pytest.mark.parametrize('given, stored', [
        ('150', '150'),
        ('150.00', '150'),
        (150, '150'),
        ('99.50', '99.5'),
        ('0.05', '0.05'),
        ('99999999.99', '99999999.99'),
    ])
    def test_price_reads_back_in_canonical_form(
        self, storage, make_customer, make_job, given, stored
    ):
        customer = make_customer()

        job = make_job(customer.id, price=given)

        assert job.price == stored
        assert storage.get_job(job.id).price == stored
        assert storage.get_jobs()[0].price == stored

    @pytest.mark.parametrize('price', ['150.555', '0.001', '123456789012.5', '100000000'])
    def test_price_outside_column_precision_rejected(
        self, storage, make_customer, make_job, price
    ):
        customer = make_customer()

        with pytest.raises(ValidationError):
            make_job(customer.id, price=price)
        assert storage.get_jobs() == []

    def test_update_price_is_canonical(self, storage, make_customer, make_job):
        customer = make_customer()
        job = make_job(customer.id)

        updated = storage.update_job(job.id, {'price': '80.10'})

        assert updated.price == '80.1'
        assert storage.get_job(job.id).price == '80.1'

    def test_jobs_ordered_by_scheduled_date(self, storage, make_customer, make_job, today):
        customer = make_customer()
        later = make_job(customer.id, title='Later', scheduled_date=today + timedelta(days=3))
        earlier = make_job(customer.id, title='Earlier', scheduled_date=today - timedelta(days=3))
        same_day = make_job(customer.id, title='Same day', scheduled_date=today + timedelta(days=3))

        titles = [job.title for job in storage.get_jobs()]

        assert titles == [earlier.title, later.title, same_day.title]

    def test_jobs_by_customer_returns_exactly_their_jobs(self, storage, make_customer, make_job):
        acme = make_customer(company_name='Acme Co')
        other = make_customer(company_name='Other Inc')
        acme_jobs = {make_job(acme.id).id, make_job(acme.id, title='Second').id}
        make_job(other.id)

        found = {job.id for job in storage.get_jobs_by_customer(acme.id)}

        assert found == acme_jobs
        assert storage.get_jobs_by_customer('missing') == []

    def test_update_job(self, storage, make_customer, make_job):
        customer = make_customer()
        job = make_job(customer.id)

        updated = storage.update_job(job.id, {'status': 'Completed', 'notes': 'Done'})

        assert updated.status == 'Completed'
        assert updated.notes == 'Done'
        assert updated.title == job.title

    def test_update_job_to_missing_customer(self, storage, make_customer, make_job):
        customer = make_customer()
        job = make_job(customer.id)
        with pytest.raises(ValidationError):
            storage.update_job(job.id, {'customer_id': 'missing'})

    def test_update_missing_job_raises_not_found(self, storage):
        with pytest.raises(NotFoundError):
            storage.update_job('missing', {'status': 'Completed'})

    def test_delete_job(self, storage, make_customer, make_job):
        customer = make_customer()
        job = make_job(customer.id)

        assert storage.delete_job(job.id) is True
        assert storage.get_job(job.id) is None
        assert storage.delete_job(job.id) is False


class TestDashboardStats:
    """Test headline dashboard figures."""

    def test_empty_store(self, storage):
        stats = storage.get_dashboard_stats()

        assert stats.total_customers == 0
        assert stats.pending_inspections == 0
        assert stats.completed_this_month == 0
        assert stats.monthly_revenue == 0

    def test_counts(self, storage, make_customer, make_job, today):
        customer = make_customer()
        make_customer(company_name='Second')
        make_job(customer.id)  # scheduled inspection
        make_job(customer.id, job_type='Maintenance')
        make_job(customer.id, status='Completed', price='200', scheduled_date=date(2025, 1, 10))
        make_job(customer.id, status='Completed', price='99.50', scheduled_date=today)
        make_job(customer.id, status='Completed', price='500', scheduled_date=date(2024, 12, 31))

        stats = storage.get_dashboard_stats()

        assert stats.total_customers == len(storage.get_customers()) == 2
        assert stats.pending_inspections == 1
        assert stats.completed_this_month == 2
        assert stats.monthly_revenue == pytest.approx(299.5)

    def test_completed_job_without_price(self, storage, make_customer, make_job):
        customer = make_customer()
        make_job(customer.id, status='Completed', price=None)

        stats = storage.get_dashboard_stats()

        assert stats.completed_this_month == 1
        assert stats.monthly_revenue == 0

    def test_revenue_matches_stored_prices(self, storage, make_customer, make_job):
        """Both backends sum the same canonical prices."""
        customer = make_customer()
        make_job(customer.id, status='Completed', price='150.50')
        make_job(customer.id, status='Completed', price='0.25')

        stats = storage.get_dashboard_stats()

        assert stats.monthly_revenue == 150.75
        assert storage.get_revenue_by_job_type()[0].revenue == 150.75


class TestDistributions:
    """Test pie-chart distributions."""

    def test_job_status_distribution(self, storage, make_customer, make_job):
        customer = make_customer()
        make_job(customer.id)
        make_job(customer.id)
        make_job(customer.id, status='Completed')
        make_job(customer.id, status='Overdue')

        slices = storage.get_job_status_distribution()

        assert [(s.name, s.value, s.color) for s in slices] == [
            ('Scheduled', 2, '#3b82f6'),
            ('Completed', 1, '#10b981'),
            ('Overdue', 1, '#ef4444'),
        ]

    def test_customer_type_distribution(self, storage, make_customer):
        make_customer(customer_type='Industrial')
        make_customer(customer_type='Commercial')
        make_customer(customer_type='Industrial')

        slices = storage.get_customer_type_distribution()

        assert [(s.name, s.value, s.color) for s in slices] == [
            ('Commercial', 1, '#3b82f6'),
            ('Industrial', 2, '#8b5cf6'),
        ]

    def test_empty_distributions(self, storage):
        assert storage.get_job_status_distribution() == []
        assert storage.get_customer_type_distribution() == []


class TestMonthlyTrends:
    """Test the twelve-month series."""

    def test_always_twelve_months(self, storage):
        trends = storage.get_monthly_trends()

        assert len(trends) == 12
        assert [t.month for t in trends][:3] == ['Jan', 'Feb', 'Mar']
        assert all(t.jobs == 0 and t.revenue == 0 for t in trends)

    def test_jobs_and_revenue_per_month(self, storage, make_customer, make_job):
        customer = make_customer()
        make_job(customer.id, scheduled_date=date(2025, 1, 5), status='Completed', price='100')
        make_job(customer.id, scheduled_date=date(2025, 1, 20))
        make_job(customer.id, scheduled_date=date(2025, 3, 2), status='Completed', price='40')
        make_job(customer.id, scheduled_date=date(2024, 3, 2), status='Completed', price='999')

        trends = {t.month: t for t in storage.get_monthly_trends()}

        assert len(trends) == 12
        assert trends['Jan'].jobs == 2
        assert trends['Jan'].revenue == pytest.approx(100)
        assert trends['Mar'].jobs == 1
        assert trends['Mar'].revenue == pytest.approx(40)
        assert trends['Feb'].jobs == 0


class TestWeeklyJobsData:
    """Test the seven-day breakdown."""

    def test_seven_days_oldest_first(self, storage):
        days = storage.get_weekly_jobs_data()

        assert [d.day for d in days] == ['Thu', 'Fri', 'Sat', 'Sun', 'Mon', 'Tue', 'Wed']

    def test_counts_per_type(self, storage, make_customer, make_job, today):
        customer = make_customer()
        make_job(customer.id, job_type='Inspection')
        make_job(customer.id, job_type='Emergency')
        make_job(customer.id, job_type='Installation', scheduled_date=today - timedelta(days=6))
        make_job(customer.id, job_type='Maintenance', scheduled_date=today - timedelta(days=7))

        days = storage.get_weekly_jobs_data()

        assert len(days) == 7
        for entry in days:
            assert entry.jobs == (
                entry.inspections + entry.installations + entry.maintenance + entry.emergency
            )
        assert days[-1].jobs == 2
        assert days[-1].inspections == 1
        assert days[-1].emergency == 1
        assert days[0].installations == 1
        assert sum(entry.maintenance for entry in days) == 0


class TestRevenueByJobType:
    """Test revenue grouped by job type."""

    def test_only_completed_jobs_count(self, storage, make_customer, make_job):
        customer = make_customer()
        make_job(customer.id, job_type='Inspection', status='Completed', price='150')
        make_job(customer.id, job_type='Inspection', status='Completed', price='50.25')
        make_job(customer.id, job_type='Installation', status='Completed', price='2500')
        make_job(customer.id, job_type='Maintenance', status='Scheduled', price='75')

        entries = storage.get_revenue_by_job_type()

        assert [(e.job_type, e.jobs) for e in entries] == [('Inspection', 2), ('Installation', 1)]
        assert all(e.jobs > 0 for e in entries)

        completed_total = sum(
            Decimal(job.price) for job in storage.get_jobs() if job.status == 'Completed'
        )
        assert sum(e.revenue for e in entries) == pytest.approx(float(completed_total))

    def test_empty(self, storage):
        assert storage.get_revenue_by_job_type() == []


class TestSqlErrorMapping:
    """Test translation of database errors on the SQL backend."""

    def test_data_error_is_validation_error(self, sql_storage):
        with pytest.raises(ValidationError, match='numeric field overflow'):
            with sql_storage._session():
                raise DataError('INSERT INTO jobs', {}, Exception('numeric field overflow'))

    def test_operational_error_is_store_unavailable(self, sql_storage):
        with pytest.raises(StoreUnavailable):
            with sql_storage._session():
                raise OperationalError('SELECT 1', {}, Exception('server closed the connection'))
