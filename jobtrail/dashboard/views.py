"""
Dashboard and list computations over a collection of applications.

Everything here is a pure function of its arguments. Functions that depend on
the current date take an optional ``today`` so callers and tests can pin it.
"""
import locale
import unicodedata
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Union
from pydantic import BaseModel

from ..storage.models import JobApplication, JobStatus, Priority

STATUS_COLORS: Dict[str, str] = {
    "saved": "#94a3b8",
    "applied": "#3b82f6",
    "interviewing": "#f59e0b",
    "offer": "#10b981",
    "rejected": "#f43f5e",
    "accepted": "#8b5cf6",
}
FALLBACK_COLOR = "#cbd5e1"

STATUS_BADGES: Dict[str, str] = {
    "applied": "primary",
    "interviewing": "warning",
    "offer": "success",
    "rejected": "danger",
    "accepted": "success",
}
PRIORITY_BADGES: Dict[str, str] = {
    "high": "danger",
    "medium": "warning",
    "low": "success",
}
DEFAULT_BADGE = "default"

BOARD_STATUSES = [
    JobStatus.SAVED,
    JobStatus.APPLIED,
    JobStatus.INTERVIEWING,
    JobStatus.OFFER,
    JobStatus.REJECTED,
]
CLOSED_STATUSES = {JobStatus.REJECTED.value, JobStatus.ACCEPTED.value}

SORT_FIELDS = {
    "companyName": "company_name",
    "company_name": "company_name",
    "position": "position",
    "createdAt": "created_at",
    "created_at": "created_at",
    "updatedAt": "updated_at",
    "updated_at": "updated_at",
}

DEADLINE_KIND_TITLES = {
    "deadline": "Application Deadline",
    "follow_up": "Follow-up Reminder",
}


class StatusCount(BaseModel):
    status: str
    name: str
    value: int
    color: str

class DeadlineEntry(BaseModel):
    job_id: str
    company_name: str
    position: str
    date: date
    kind: str
    title: str
    label: str

class ActivityPoint(BaseModel):
    date: date
    label: str
    count: int

class DashboardSummary(BaseModel):
    total: int
    active: int
    interviewing: int
    offers: int

class BoardColumn(BaseModel):
    status: JobStatus
    title: str
    jobs: List[JobApplication]


def _status_str(status: Union[JobStatus, str, None]) -> str:
    if isinstance(status, JobStatus):
        return status.value
    return "" if status is None else str(status)


def status_label(status: Union[JobStatus, str]) -> str:
    """``"interviewing"`` -> ``"Interviewing"``; unknown values pass through the same way."""
    text = _status_str(status)
    return text[:1].upper() + text[1:]


def status_color(status: Union[JobStatus, str]) -> str:
    return STATUS_COLORS.get(_status_str(status), FALLBACK_COLOR)


def status_badge(status: Union[JobStatus, str, None]) -> str:
    """Badge variant for a status; anything unrecognised gets the default."""
    return STATUS_BADGES.get(_status_str(status), DEFAULT_BADGE)


def priority_badge(priority: Union[Priority, str, None]) -> str:
    value = priority.value if isinstance(priority, Priority) else str(priority or "")
    return PRIORITY_BADGES.get(value, DEFAULT_BADGE)


def status_counts(jobs: Iterable[JobApplication]) -> List[StatusCount]:
    """Count jobs per status, in the order statuses are first seen.
    
    The values always add up to the number of jobs; an empty collection gives
    an empty list.
    """
    counts = Counter()
    for job in jobs:
        counts[_status_str(job.status)] += 1
    return [
        StatusCount(
            status=status,
            name=status_label(status),
            value=count,
            color=status_color(status),
        )
        for status, count in counts.items()
    ]


def format_day(day: date) -> str:
    """``date(2025, 3, 1)`` -> ``"Mar 1, 2025"``."""
    return f"{day:%b} {day.day}, {day.year}"


def classify_date(day: date, today: date) -> str:
    """Overdue, Today, or the formatted future date."""
    if day < today:
        return "Overdue"
    if day == today:
        return "Today"
    return format_day(day)


def upcoming_deadlines(
    jobs: Iterable[JobApplication],
    today: Optional[date] = None,
    limit: int = 5
) -> List[DeadlineEntry]:
    """Earliest deadline and follow-up dates across all jobs.
    
    Args:
        jobs: Applications to scan
        today: Reference date for labels; defaults to the current date
        limit: Maximum number of entries returned
        
    Returns:
        Entries sorted by date ascending, at most ``limit`` of them
    """
    today = today or date.today()
    entries = []
    for job in jobs:
        for kind, day in (("deadline", job.deadline), ("follow_up", job.follow_up_date)):
            if day is None:
                continue
            entries.append(DeadlineEntry(
                job_id=job.id,
                company_name=job.company_name,
                position=job.position,
                date=day,
                kind=kind,
                title=DEADLINE_KIND_TITLES[kind],
                label=classify_date(day, today),
            ))
    entries.sort(key=lambda entry: entry.date)
    return entries[:limit]


def _text_key(value: Optional[str]):
    """Accented letters sort with their base letter; exact form breaks ties."""
    folded = (value or "").casefold()
    base = "".join(
        ch for ch in unicodedata.normalize("NFKD", folded) if not unicodedata.combining(ch)
    )
    return (locale.strxfrm(base), locale.strxfrm(folded))


def _time_key(value: datetime) -> float:
    return value.timestamp()


def filter_and_sort(
    jobs: Iterable[JobApplication],
    search: str = "",
    status: Union[JobStatus, str, None] = None,
    sort_by: str = "updatedAt",
    order: str = "desc"
) -> List[JobApplication]:
    """Search, filter by status, and sort a list of applications.
    
    Args:
        jobs: Applications to filter
        search: Case-insensitive substring matched against company or position
        status: Exact status to keep; None or "all" keeps every status
        sort_by: companyName, position, createdAt or updatedAt (snake_case works too)
        order: "asc" or "desc"
        
    Raises:
        ValueError: for an unknown sort field or order
    """
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Cannot sort by {sort_by!r}")
    if order not in ("asc", "desc"):
        raise ValueError(f"Sort order must be 'asc' or 'desc', not {order!r}")

    term = (search or "").casefold()
    wanted = None if status in (None, "all") else _status_str(status)

    matches = [
        job for job in jobs
        if (term in job.company_name.casefold() or term in job.position.casefold())
        and (wanted is None or _status_str(job.status) == wanted)
    ]

    attr = SORT_FIELDS[sort_by]
    key_func = _time_key if attr in ("created_at", "updated_at") else _text_key
    return sorted(
        matches,
        key=lambda job: key_func(getattr(job, attr)),
        reverse=(order == "desc")
    )


def activity_series(
    jobs: Iterable[JobApplication],
    today: Optional[date] = None,
    days: int = 14
) -> List[ActivityPoint]:
    """Number of applications created on each of the last ``days`` days.
    
    Days are calendar days of ``created_at`` in the timestamp's own zone;
    the series runs oldest first and ends on ``today``.
    """
    today = today or date.today()
    start = today - timedelta(days=days - 1)
    created = Counter(
        job.created_at.date() for job in jobs
        if start <= job.created_at.date() <= today
    )
    series = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        series.append(ActivityPoint(date=day, label=f"{day:%b %d}", count=created.get(day, 0)))
    return series


def dashboard_summary(jobs: Sequence[JobApplication]) -> DashboardSummary:
    """Headline numbers for the dashboard cards."""
    statuses = [_status_str(job.status) for job in jobs]
    return DashboardSummary(
        total=len(statuses),
        active=sum(1 for s in statuses if s not in CLOSED_STATUSES),
        interviewing=statuses.count(JobStatus.INTERVIEWING.value),
        offers=statuses.count(JobStatus.OFFER.value),
    )


def board_columns(jobs: Iterable[JobApplication]) -> List[BoardColumn]:
    """Group jobs into the kanban columns, keeping collection order inside each."""
    jobs = list(jobs)
    return [
        BoardColumn(
            status=status,
            title=status_label(status),
            jobs=[job for job in jobs if _status_str(job.status) == status.value],
        )
        for status in BOARD_STATUSES
    ]
