"""Models package for the FireOps business manager."""
from backend.models.schema import Base, Customer, CustomerType, CustomerStatus
from backend.models.job import Job, JobType, JobStatus

__all__ = [
    'Base', 'Customer', 'CustomerType', 'CustomerStatus',
    'Job', 'JobType', 'JobStatus'
]
