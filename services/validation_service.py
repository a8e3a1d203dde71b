"""
Validation Service - Record validation and spreadsheet cell coercion.

This module wraps the Pydantic record schemas so that the manual-entry
API and the spreadsheet importer validate through exactly the same rules,
and provides helpers that turn raw worksheet cell values into the text,
date and number shapes those schemas expect.
"""

import logging
import math
from datetime import date, datetime, time
from typing import Any, Iterable, Optional, Type, TypeVar

from openpyxl.utils.datetime import from_excel
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from backend.models.records import CustomerCreate, CustomerUpdate, JobCreate, JobUpdate
from services.errors import ValidationError

logger = logging.getLogger(__name__)

SchemaT = TypeVar('SchemaT', bound=BaseModel)


def _validate(schema: Type[SchemaT], data: Any) -> SchemaT:
    """Validate a mapping (or an existing schema instance) against a schema."""
    if isinstance(data, schema):
        return data
    if isinstance(data, BaseModel):
        data = data.model_dump(exclude_unset=True)
    try:
        return schema.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            {'loc': '.'.join(str(part) for part in err['loc']), 'msg': err['msg']}
            for err in e.errors()
        ]
        summary = '; '.join(f"{err['loc']}: {err['msg']}" for err in errors)
        raise ValidationError(f"Invalid {schema.__name__}: {summary}", errors) from e


def validate_customer(data: Any) -> CustomerCreate:
    """Validate customer fields for creation."""
    return _validate(CustomerCreate, data)


def validate_customer_update(data: Any) -> CustomerUpdate:
    """Validate a partial customer update."""
    return _validate(CustomerUpdate, data)


def validate_job(data: Any) -> JobCreate:
    """Validate job fields for creation."""
    return _validate(JobCreate, data)


def validate_job_update(data: Any) -> JobUpdate:
    """Validate a partial job update."""
    return _validate(JobUpdate, data)


# ---------------------------------------------------------------------------
# Cell coercion helpers
# ---------------------------------------------------------------------------

def is_blank(value: Any) -> bool:
    """True for cells that count as empty."""
    return value is None or (isinstance(value, str) and not value.strip())


def trim_row(row: Iterable[Any]) -> list:
    """Drop trailing empty cells so len() reflects the populated width."""
    cells = list(row)
    while cells and is_blank(cells[-1]):
        cells.pop()
    return cells


def cell_at(row: list, index: int) -> Any:
    """Cell value at a column index, None past the end of the row."""
    return row[index] if index < len(row) else None


def cell_text(value: Any, default: str = '') -> str:
    """
    Render a cell as text.

    Integral floats lose their trailing '.0' so numeric phone numbers and
    prices read the way they were typed.
    """
    if is_blank(value):
        return default
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value).strip()


def cell_choice(value: Any, choices: Iterable[str], default: str) -> str:
    """Return the cell text if it is one of choices, otherwise default."""
    text = cell_text(value)
    return text if text in set(choices) else default


def cell_date(value: Any, default: Optional[date] = None) -> Optional[date]:
    """
    Coerce a cell to a date.

    Accepts datetime/date objects, Excel serial numbers and ISO-8601
    strings (a time part is ignored). Returns default when the cell is
    empty or cannot be parsed.
    """
    if is_blank(value):
        return default
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            converted = from_excel(value)
        except (ValueError, OverflowError, TypeError):
            logger.debug(f"Unparseable date serial: {value!r}")
            return default
        return converted.date() if isinstance(converted, datetime) else default
    text = str(value).strip()
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        logger.debug(f"Unparseable date text: {text!r}")
        return default


def cell_time(value: Any, default: str) -> str:
    """Coerce a cell to HH:MM text, falling back to default."""
    if is_blank(value):
        return default
    if isinstance(value, (time, datetime)):
        return value.strftime('%H:%M')
    return cell_text(value, default)


def cell_positive_int(value: Any, default: int) -> int:
    """Coerce a cell to a positive integer, falling back to default."""
    if is_blank(value) or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip())
    except ValueError:
        return default
    if math.isnan(number) or math.isinf(number) or int(number) <= 0:
        return default
    return int(number)
