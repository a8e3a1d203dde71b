"""
Reporting helpers shared by both storage backends.

The storage implementations only gather raw group-by counts and sums;
the helpers here turn them into dashboard view models so that both
backends produce identical shapes, orderings and colours.
"""

from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Mapping, Tuple, Type

from backend.models.job import JobStatus, JobType
from backend.models.schema import CustomerType
from backend.models.reports import (
    DistributionSlice, MonthlyTrend, RevenueByJobType, WeeklyJobsData
)

DEFAULT_COLOR = '#6b7280'

STATUS_COLORS = {
    JobStatus.SCHEDULED.value: '#3b82f6',
    JobStatus.IN_PROGRESS.value: '#f59e0b',
    JobStatus.COMPLETED.value: '#10b981',
    JobStatus.OVERDUE.value: '#ef4444',
    JobStatus.CANCELLED.value: '#6b7280',
}

CUSTOMER_TYPE_COLORS = {
    CustomerType.COMMERCIAL.value: '#3b82f6',
    CustomerType.RESIDENTIAL.value: '#10b981',
    CustomerType.INDUSTRIAL.value: '#8b5cf6',
}

MONTH_LABELS = ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']

WEEKDAY_LABELS = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']

# Weekly breakdown field for each job type
WEEKLY_TYPE_FIELDS = {
    JobType.INSPECTION.value: 'inspections',
    JobType.INSTALLATION.value: 'installations',
    JobType.MAINTENANCE.value: 'maintenance',
    JobType.EMERGENCY.value: 'emergency',
}


def price_amount(price) -> Decimal:
    """Price as a Decimal; missing or unparseable prices count as zero."""
    if price is None:
        return Decimal(0)
    if isinstance(price, Decimal):
        return price if price.is_finite() else Decimal(0)
    try:
        amount = Decimal(str(price).strip())
    except InvalidOperation:
        return Decimal(0)
    return amount if amount.is_finite() else Decimal(0)


def month_bounds(today: date) -> Tuple[date, date]:
    """First day of today's month and first day of the following month."""
    start = today.replace(day=1)
    if start.month == 12:
        end = start.replace(year=start.year + 1, month=1)
    else:
        end = start.replace(month=start.month + 1)
    return start, end


def year_bounds(today: date) -> Tuple[date, date]:
    """First day of today's year and first day of the following year."""
    return date(today.year, 1, 1), date(today.year + 1, 1, 1)


def week_window(today: date) -> List[date]:
    """The seven calendar days ending today, oldest first."""
    return [today - timedelta(days=offset) for offset in range(6, -1, -1)]


def build_distribution(
    counts: Mapping[str, int],
    order: Iterable[str],
    palette: Mapping[str, str],
    slice_cls: Type[DistributionSlice]
) -> List[DistributionSlice]:
    """
    Build pie-chart slices from category counts.

    Known categories come first in declaration order, unknown ones follow
    in the order they were seen and get the default colour. Categories
    with no records are omitted.
    """
    ordered = [name for name in order if counts.get(name)]
    ordered += [name for name in counts if name not in ordered and counts[name]]
    return [
        slice_cls(name=name, value=counts[name], color=palette.get(name, DEFAULT_COLOR))
        for name in ordered
    ]


def build_monthly_trends(
    jobs_by_month: Mapping[int, int],
    revenue_by_month: Mapping[int, Decimal]
) -> List[MonthlyTrend]:
    """Twelve entries, Jan..Dec, zero-filled."""
    return [
        MonthlyTrend(
            month=label,
            jobs=jobs_by_month.get(index, 0),
            revenue=float(revenue_by_month.get(index, Decimal(0)))
        )
        for index, label in enumerate(MONTH_LABELS, 1)
    ]


def build_weekly_jobs(
    days: List[date],
    counts: Mapping[Tuple[date, str], int]
) -> List[WeeklyJobsData]:
    """
    One entry per day in days, with per-type subcounts.

    The total for a day only includes the four known job types so that
    jobs always equals the sum of the subcounts.
    """
    result = []
    for day in days:
        entry = WeeklyJobsData(day=WEEKDAY_LABELS[day.weekday()])
        for job_type, field in WEEKLY_TYPE_FIELDS.items():
            count = counts.get((day, job_type), 0)
            setattr(entry, field, count)
            entry.jobs += count
        result.append(entry)
    return result


def build_revenue_by_job_type(
    totals: Mapping[str, Tuple[Decimal, int]]
) -> List[RevenueByJobType]:
    """Entries for job types with at least one completed job."""
    order = [job_type.value for job_type in JobType]
    names = [name for name in order if name in totals]
    names += [name for name in totals if name not in names]
    return [
        RevenueByJobType(job_type=name, revenue=float(totals[name][0]), jobs=totals[name][1])
        for name in names
        if totals[name][1] > 0
    ]


def status_order() -> List[str]:
    return [status.value for status in JobStatus]


def customer_type_order() -> List[str]:
    return [customer_type.value for customer_type in CustomerType]


def tally(pairs: Iterable[Tuple[str, int]]) -> Dict[str, int]:
    """Sum counts per key, preserving first-seen order."""
    totals: Dict[str, int] = {}
    for key, count in pairs:
        totals[key] = totals.get(key, 0) + count
    return totals
