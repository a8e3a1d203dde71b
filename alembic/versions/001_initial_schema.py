"""Initial schema for customers and jobs

Revision ID: 001_initial_schema
Revises: 
Create Date: 2025-10-14

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create customers table
    op.create_table(
        'customers',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('company_name', sa.Text(), nullable=False),
        sa.Column('contact_person', sa.Text(), nullable=False),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('phone', sa.Text(), nullable=False),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('customer_type', sa.String(length=20), nullable=False,
                  comment='Commercial, Residential or Industrial'),
        sa.Column('status', sa.String(length=20), server_default='Active', nullable=False),
        sa.Column('last_inspection', sa.Date(), nullable=True),
        sa.Column('next_due', sa.Date(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'),
                  nullable=False, comment='Record creation timestamp'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            "customer_type IN ('Commercial', 'Residential', 'Industrial')",
            name='customers_customer_type_check'
        ),
        sa.CheckConstraint("status IN ('Active', 'Inactive')", name='customers_status_check'),
        comment='Client accounts with contact and classification data'
    )

    # Create indexes on customers table
    op.create_index('idx_customers_created_at', 'customers', ['created_at'])
    op.create_index('idx_customers_company_name', 'customers', ['company_name'])

    # Create jobs table
    op.create_table(
        'jobs',
        sa.Column('id', sa.String(length=36), nullable=False),
        sa.Column('customer_id', sa.String(length=36), nullable=False, comment='Owning customer'),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('job_type', sa.String(length=20), nullable=False,
                  comment='Inspection, Installation, Maintenance or Emergency'),
        sa.Column('status', sa.String(length=20), server_default='Scheduled', nullable=False),
        sa.Column('scheduled_date', sa.Date(), nullable=False),
        sa.Column('scheduled_time', sa.Text(), nullable=False, comment='Free text HH:MM'),
        sa.Column('estimated_duration', sa.Integer(), nullable=True,
                  comment='Estimated duration in minutes'),
        sa.Column('price', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(), server_default=sa.text('CURRENT_TIMESTAMP'),
                  nullable=False, comment='Record creation timestamp'),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['customer_id'], ['customers.id']),
        sa.CheckConstraint(
            "job_type IN ('Inspection', 'Installation', 'Maintenance', 'Emergency')",
            name='jobs_job_type_check'
        ),
        sa.CheckConstraint(
            "status IN ('Scheduled', 'In Progress', 'Completed', 'Cancelled', 'Overdue')",
            name='jobs_status_check'
        ),
        comment='Scheduled service engagements'
    )

    # Create indexes on jobs table
    op.create_index('idx_jobs_customer_id', 'jobs', ['customer_id'])
    op.create_index('idx_jobs_scheduled_date', 'jobs', ['scheduled_date'])
    op.create_index('idx_jobs_status_type', 'jobs', ['status', 'job_type'])


def downgrade() -> None:
    # Drop jobs table and indexes
    op.drop_index('idx_jobs_status_type', table_name='jobs')
    op.drop_index('idx_jobs_scheduled_date', table_name='jobs')
    op.drop_index('idx_jobs_customer_id', table_name='jobs')
    op.drop_table('jobs')

    # Drop customers table and indexes
    op.drop_index('idx_customers_company_name', table_name='customers')
    op.drop_index('idx_customers_created_at', table_name='customers')
    op.drop_table('customers')
