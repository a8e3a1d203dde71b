"""
Dashboard router - Aggregated figures for the dashboard charts.

All figures are computed on read from current storage contents.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_storage
from backend.models.reports import (
    CustomerTypeDistribution, DashboardStats, JobStatusDistribution,
    MonthlyTrend, RevenueByJobType, WeeklyJobsData
)
from services.storage_service import IStorage

# Create router
router = APIRouter(prefix='/dashboard', tags=['dashboard'])


@router.get('/stats', response_model=DashboardStats)
async def get_dashboard_stats(storage: IStorage = Depends(get_storage)):
    """
    Headline figures: total customers, pending inspections, jobs completed
    this month and this month's revenue.
    """
    return storage.get_dashboard_stats()


@router.get('/job-status-distribution', response_model=List[JobStatusDistribution])
async def get_job_status_distribution(storage: IStorage = Depends(get_storage)):
    """Job counts per status, with chart colours."""
    return storage.get_job_status_distribution()


@router.get('/monthly-trends', response_model=List[MonthlyTrend])
async def get_monthly_trends(storage: IStorage = Depends(get_storage)):
    """Jobs and completed revenue per month of the current year."""
    return storage.get_monthly_trends()


@router.get('/customer-type-distribution', response_model=List[CustomerTypeDistribution])
async def get_customer_type_distribution(storage: IStorage = Depends(get_storage)):
    """Customer counts per customer type, with chart colours."""
    return storage.get_customer_type_distribution()


@router.get('/weekly-jobs', response_model=List[WeeklyJobsData])
async def get_weekly_jobs(storage: IStorage = Depends(get_storage)):
    """Jobs per day over the last seven days, split by job type."""
    return storage.get_weekly_jobs_data()


@router.get('/revenue-by-job-type', response_model=List[RevenueByJobType])
async def get_revenue_by_job_type(storage: IStorage = Depends(get_storage)):
    """Revenue and count of completed jobs per job type."""
    return storage.get_revenue_by_job_type()
