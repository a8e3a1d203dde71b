#!/usr/bin/env python3
"""
FireOps Command Line Tool - Dual Mode

This script can operate in two modes:
1. Direct mode (default): Works on the configured storage through the services
2. API mode: Makes HTTP requests to the FastAPI backend

Usage:
    # Import a workbook (direct mode)
    python scripts/fireops_cli.py import --file import.xlsx

    # Import a workbook through the API
    python scripts/fireops_cli.py import --file import.xlsx --api-url http://localhost:8000

    # Write an import template
    python scripts/fireops_cli.py template --type jobs --output jobs_template.xlsx

    # Load demo data / print dashboard figures
    python scripts/fireops_cli.py seed
    python scripts/fireops_cli.py stats [--api-url http://localhost:8000]
"""

import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import logging
from typing import Optional

import click
from dotenv import load_dotenv
import requests

from services.errors import FireOpsError
from services.excel_import_service import ExcelImportService
from services.seed_service import seed_sample_data
from services.storage_service import create_storage
from services.template_service import XLSX_MEDIA_TYPE, TemplateService

# Load environment variables
load_dotenv()

# Configure logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FILE = os.getenv('LOG_FILE', 'cli.log')

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(LOG_FILE),
        logging.StreamHandler(sys.stdout)
    ]
)

logger = logging.getLogger('fireops_cli')

# Configuration. Direct mode defaults to a local SQLite file, since an
# in-memory store would be gone when the command exits.
STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'sql')
DATABASE_URL = os.getenv('DATABASE_URL', 'sqlite:///fireops.db')


def open_storage():
    """Create the storage backend for direct mode."""
    if STORAGE_BACKEND == 'memory':
        click.echo("⚠️  STORAGE_BACKEND=memory: changes are lost when this command exits", err=True)
    return create_storage(STORAGE_BACKEND, database_url=DATABASE_URL)


def show_progress(stage: str, percent: float, message: str):
    bar_length = 40
    filled = int(bar_length * percent / 100)
    bar = '█' * filled + '░' * (bar_length - filled)
    click.echo(f"\r[{bar}] {percent:.1f}% - {stage}: {message}", nl=False)


def print_import_result(customers_created: int, jobs_created: int, skipped_rows: list):
    click.echo(f"\n✓ Import finished!")
    click.echo(f"  Customers created: {customers_created}")
    click.echo(f"  Jobs created: {jobs_created}")

    if skipped_rows:
        click.echo(f"\n⚠️  Skipped rows: {len(skipped_rows)}")
        for row in skipped_rows[:10]:
            click.echo(f"  {row['sheet']} row {row['row']}: {row['reason']}")
        if len(skipped_rows) > 10:
            click.echo(f"  ... and {len(skipped_rows) - 10} more")


def print_stats(stats: dict):
    click.echo("\nDashboard")
    click.echo("=" * 50)
    click.echo(f"Total customers: {stats['totalCustomers']}")
    click.echo(f"Pending inspections: {stats['pendingInspections']}")
    click.echo(f"Completed this month: {stats['completedThisMonth']}")
    click.echo(f"Revenue this month: {stats['monthlyRevenue']:.2f}")


@click.group()
def cli():
    """FireOps customer and job management tool"""


@cli.command('import')
@click.option('--file', '-f', 'file_path', required=True, type=click.Path(exists=True),
              help='Path to the workbook to import')
@click.option('--api-url', envvar='API_URL', help='FastAPI backend URL (enables API mode)')
def import_cmd(file_path: str, api_url: Optional[str]):
    """Import customers and jobs from a workbook."""

    if api_url:
        click.echo(f"🌐 API Mode: Using backend at {api_url}")
        import_via_api(api_url, file_path)
    else:
        click.echo("💾 Direct Mode: Using local storage")
        import_direct(file_path)


@cli.command('template')
@click.option('--type', '-t', 'template_type', required=True,
              type=click.Choice(TemplateService.template_types()), help='Template to generate')
@click.option('--output', '-o', type=click.Path(dir_okay=False),
              help='Output path (default: <type>_template.xlsx)')
@click.option('--api-url', envvar='API_URL', help='FastAPI backend URL (enables API mode)')
def template_cmd(template_type: str, output: Optional[str], api_url: Optional[str]):
    """Write an import template workbook."""
    service = TemplateService()
    output = output or service.filename(template_type)

    if api_url:
        try:
            response = requests.get(f"{api_url}/api/download/template/{template_type}", timeout=30)
        except requests.exceptions.RequestException as e:
            click.echo(f"❌ Network error: {e}", err=True)
            sys.exit(1)
        if response.status_code != 200:
            click.echo(f"❌ Download failed ({response.status_code}): {response.text}", err=True)
            sys.exit(1)
        content = response.content
    else:
        content = service.build(template_type)

    Path(output).write_bytes(content)
    click.echo(f"✓ Wrote {template_type} template to {output}")


@cli.command('seed')
def seed_cmd():
    """Load the sample customers and jobs (direct mode only)."""
    storage = open_storage()
    try:
        customers, jobs = seed_sample_data(storage)
    except FireOpsError as e:
        logger.error(f"Seeding failed: {e}", exc_info=True)
        click.echo(f"✗ Seeding failed: {e}", err=True)
        sys.exit(1)
    finally:
        storage.close()

    if customers:
        click.echo(f"✓ Seeded {customers} customers and {jobs} jobs")
    else:
        click.echo("ℹ️  Storage already has customers, nothing seeded")


@cli.command('stats')
@click.option('--api-url', envvar='API_URL', help='FastAPI backend URL (enables API mode)')
def stats_cmd(api_url: Optional[str]):
    """Print the headline dashboard figures."""

    if api_url:
        try:
            response = requests.get(f"{api_url}/api/dashboard/stats", timeout=10)
        except requests.exceptions.RequestException as e:
            click.echo(f"❌ Network error: {e}", err=True)
            sys.exit(1)
        if response.status_code != 200:
            click.echo(f"❌ Request failed ({response.status_code}): {response.text}", err=True)
            sys.exit(1)
        print_stats(response.json())
        return

    storage = open_storage()
    try:
        stats = storage.get_dashboard_stats()
    except FireOpsError as e:
        click.echo(f"✗ Could not read statistics: {e}", err=True)
        sys.exit(1)
    finally:
        storage.close()
    print_stats(stats.model_dump(by_alias=True))


# ============================================================================
# Direct Mode Implementation (Uses Services Directly)
# ============================================================================

def import_direct(file_path: str):
    """Import file through the import service."""
    click.echo(f"\n📁 Importing: {file_path}")

    storage = open_storage()
    try:
        click.echo("\n")
        service = ExcelImportService(storage, progress_callback=show_progress)
        result = service.import_file(file_path)
        click.echo()  # New line after progress bar
    except FireOpsError as e:
        logger.error(f"Import failed: {e}", exc_info=True)
        click.echo(f"\n✗ Import failed: {e}", err=True)
        sys.exit(1)
    finally:
        storage.close()

    data = result.to_dict()
    print_import_result(data['customers_created'], data['jobs_created'], data['skipped_rows'])


# ============================================================================
# API Mode Implementation (Uses FastAPI Backend)
# ============================================================================

def import_via_api(api_url: str, file_path: str):
    """Import file via FastAPI backend."""

    click.echo(f"\n📤 Uploading {file_path} to {api_url}...")

    try:
        with open(file_path, 'rb') as f:
            files = {'file': (Path(file_path).name, f, XLSX_MEDIA_TYPE)}
            response = requests.post(f"{api_url}/api/upload/excel", files=files, timeout=120)
    except requests.exceptions.RequestException as e:
        click.echo(f"❌ Network error: {e}", err=True)
        sys.exit(1)

    if response.status_code != 200:
        click.echo(f"❌ Upload failed ({response.status_code}): {response.text}", err=True)
        sys.exit(1)

    result = response.json()
    print_import_result(result['customersCreated'], result['jobsCreated'], result['skippedRows'])


if __name__ == '__main__':
    cli()
