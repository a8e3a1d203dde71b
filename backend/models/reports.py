"""Dashboard view models computed on read, never persisted."""

from pydantic import Field

from backend.models.records import RecordModel


class DashboardStats(RecordModel):
    """Headline figures for the dashboard cards."""

    total_customers: int = Field(..., description="Number of customers")
    pending_inspections: int = Field(..., description="Scheduled inspection jobs")
    completed_this_month: int = Field(..., description="Jobs completed in the current month")
    monthly_revenue: float = Field(..., description="Revenue of jobs completed in the current month")


class DistributionSlice(RecordModel):
    """One slice of a pie chart."""

    name: str = Field(..., description="Category label")
    value: int = Field(..., description="Record count")
    color: str = Field(..., description="Display colour")


class JobStatusDistribution(DistributionSlice):
    """Job count for one status."""


class CustomerTypeDistribution(DistributionSlice):
    """Customer count for one customer type."""


class MonthlyTrend(RecordModel):
    """Job volume and revenue for one calendar month."""

    month: str = Field(..., description="Month label, e.g. Jan")
    jobs: int = Field(..., description="Jobs scheduled in the month")
    revenue: float = Field(..., description="Revenue of completed jobs in the month")


class WeeklyJobsData(RecordModel):
    """Job counts for one day, split by job type."""

    day: str = Field(..., description="Weekday label, e.g. Mon")
    jobs: int = 0
    inspections: int = 0
    installations: int = 0
    maintenance: int = 0
    emergency: int = 0


class RevenueByJobType(RecordModel):
    """Revenue and count of completed jobs for one job type."""

    job_type: str = Field(..., description="Job type")
    revenue: float = Field(..., description="Summed price of completed jobs")
    jobs: int = Field(..., description="Number of completed jobs")
