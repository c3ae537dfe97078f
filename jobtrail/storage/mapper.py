"""
Translation between persisted job rows and domain objects.

This is the only module that knows the persistence field names. Rows are
plain dicts as returned by a ``JobRepository``.
"""
import re
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Union

from .models import IMMUTABLE_FIELDS, JobApplication, JobDraft, JobUpdate

Row = Dict[str, Any]

# domain attribute -> persisted column
FIELD_MAP = {
    "id": "id",
    "company_name": "company",
    "position": "position",
    "application_link": "application_link",
    "job_type": "job_type",
    "salary": "salary",
    "status": "status",
    "notes": "notes",
    "priority": "priority",
    "deadline": "deadline",
    "follow_up_date": "follow_up_date",
    "location": "location",
    "contact_name": "contact_name",
    "contact_email": "contact_email",
    "tags": "tags",
    "created_at": "created_at",
    "updated_at": "updated_at",
}

WRITABLE_FIELDS = [name for name in FIELD_MAP if name not in IMMUTABLE_FIELDS]

# Empty text in these columns reads back as absent
OPTIONAL_TEXT_FIELDS = (
    "application_link",
    "notes",
    "location",
    "contact_name",
    "contact_email",
)

_NON_NUMERIC = re.compile(r"[^0-9.]")
_LEADING_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_salary(text: Optional[str]) -> Optional[float]:
    """Parse free-text salary into a number.
    
    Every character that is not a digit or a decimal point is dropped and the
    leading number of what remains is read, so ``"$85,000"`` gives ``85000.0``.
    Empty or unparseable input gives ``None``; this never raises.
    """
    if not text:
        return None
    cleaned = _NON_NUMERIC.sub("", str(text))
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None
    try:
        return float(match.group(0))
    except ValueError:
        return None


def format_salary(value: Optional[Union[int, float]]) -> Optional[str]:
    """Render a persisted salary for display; whole numbers drop the ``.0``."""
    if value is None:
        return None
    number = float(value)
    if number.is_integer():
        return str(int(number))
    # Shortest repr digits, written out without exponent notation
    text = format(Decimal(repr(number)), "f")
    return text.rstrip("0").rstrip(".") if "." in text else text


def _serialize(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if hasattr(value, "value"):  # enums
        return value.value
    if isinstance(value, (list, tuple)):
        return list(value)
    return value


def from_persistence(row: Mapping[str, Any]) -> JobApplication:
    """Build a ``JobApplication`` from a persisted row."""
    data = {}
    for attr, column in FIELD_MAP.items():
        if column in row:
            data[attr] = row[column]
    data["salary"] = format_salary(row.get("salary"))
    data["tags"] = list(row.get("tags") or [])
    for attr in OPTIONAL_TEXT_FIELDS:
        if not data.get(attr):
            data[attr] = None
    if data.get("priority") is None:
        data.pop("priority", None)
    return JobApplication.model_validate(data)


def to_persistence(
    job: Union[JobDraft, JobUpdate, JobApplication, Mapping[str, Any]],
    user_id: str
) -> Row:
    """Build a persistence row from domain fields.
    
    Args:
        job: Draft, partial update, full application, or mapping of domain
            field names. Only fields that were actually set are emitted.
        user_id: Acting user's id, attached to every write
        
    Returns:
        Row dict keyed by persisted column names, without id or timestamps
    """
    if isinstance(job, (JobDraft, JobUpdate, JobApplication)):
        fields = job.model_dump(exclude_unset=True)
        if isinstance(job, JobDraft):
            # Defaults count as set for a new record
            fields = {**job.model_dump(exclude_none=True), **fields}
    else:
        fields = JobUpdate.model_validate(dict(job)).model_dump(exclude_unset=True)

    row: Row = {}
    for attr in WRITABLE_FIELDS:
        if attr not in fields:
            continue
        value = fields[attr]
        if attr == "salary":
            row["salary"] = parse_salary(value)
        elif attr == "priority" and value is None:
            continue
        else:
            row[FIELD_MAP[attr]] = _serialize(value)
    row["user_id"] = user_id
    return row
