"""
Tests for dashboard and list views.
"""
from datetime import date, datetime, timedelta, timezone
import pytest

from jobtrail.dashboard.views import (
    FALLBACK_COLOR, STATUS_COLORS, activity_series, board_columns, classify_date,
    dashboard_summary, filter_and_sort, priority_badge, status_badge, status_counts,
    upcoming_deadlines
)
from jobtrail.storage.models import JobStatus, Priority

TODAY = date(2024, 6, 15)

def test_status_counts_empty():
    assert status_counts([]) == []

def test_status_counts_labels_colors_and_total(make_job):
    jobs = [
        make_job(status="applied"),
        make_job(status="saved"),
        make_job(status="applied"),
        make_job(status="withdrawn"),
    ]
    counts = status_counts(jobs)
    
    assert [(c.name, c.value) for c in counts] == [("Applied", 2), ("Saved", 1), ("Withdrawn", 1)]
    assert counts[0].color == STATUS_COLORS["applied"]
    assert counts[-1].color == FALLBACK_COLOR
    assert sum(c.value for c in counts) == len(jobs)

def test_badges_tolerate_unknown_values():
    assert status_badge(JobStatus.OFFER) == "success"
    assert status_badge("accepted") == "success"
    assert status_badge("rejected") == "danger"
    assert status_badge("saved") == "default"
    assert status_badge("withdrawn") == "default"
    assert status_badge(None) == "default"
    assert priority_badge(Priority.HIGH) == "danger"
    assert priority_badge("low") == "success"
    assert priority_badge("urgent") == "default"

def test_upcoming_deadlines_sorted(make_job):
    jobs = [
        make_job(deadline=date(2025, 3, 1)),
        make_job(deadline=date(2024, 1, 1)),
        make_job(deadline=date(2025, 1, 15)),
    ]
    entries = upcoming_deadlines(jobs, today=TODAY)
    
    assert [e.date for e in entries] == [date(2024, 1, 1), date(2025, 1, 15), date(2025, 3, 1)]
    assert [e.label for e in entries] == ["Overdue", "Jan 15, 2025", "Mar 1, 2025"]

def test_upcoming_deadlines_capped_and_include_follow_ups(make_job):
    jobs = [
        make_job(deadline=TODAY + timedelta(days=i), follow_up_date=TODAY + timedelta(days=i))
        for i in range(4)
    ]
    entries = upcoming_deadlines(jobs, today=TODAY)
    
    assert len(entries) == 5
    assert entries[0].label == "Today"
    assert [e.kind for e in entries[:2]] == ["deadline", "follow_up"]
    assert entries[1].title == "Follow-up Reminder"
    assert entries[0].job_id == jobs[0].id

def test_upcoming_deadlines_skips_jobs_without_dates(make_job):
    assert upcoming_deadlines([make_job(), make_job()], today=TODAY) == []

def test_classify_date_depends_on_today():
    day = date(2024, 6, 15)
    
    assert classify_date(day, date(2024, 6, 14)) == "Jun 15, 2024"
    assert classify_date(day, day) == "Today"
    assert classify_date(day, date(2024, 6, 16)) == "Overdue"

def test_filter_and_sort_scenario(make_job):
    jobs = [
        make_job(company_name="Globex", position="Analyst"),
        make_job(company_name="Acme", position="Engineer"),
    ]
    
    found = filter_and_sort(jobs, search="eng")
    assert [(j.company_name, j.position) for j in found] == [("Acme", "Engineer")]
    
    ordered = filter_and_sort(jobs, sort_by="companyName", order="asc")
    assert [j.company_name for j in ordered] == ["Acme", "Globex"]

def test_filter_by_status(make_job):
    jobs = [make_job(status="offer"), make_job(status="saved"), make_job(status="offer")]
    
    assert len(filter_and_sort(jobs, status="offer")) == 2
    assert len(filter_and_sort(jobs, status=JobStatus.SAVED)) == 1
    assert len(filter_and_sort(jobs, status="all")) == 3

def test_sort_by_dates(make_job):
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    jobs = [
        make_job(id="mid", updated_at=base + timedelta(days=2)),
        make_job(id="old", updated_at=base + timedelta(days=1)),
        make_job(id="new", updated_at=base + timedelta(days=3)),
    ]
    
    assert [j.id for j in filter_and_sort(jobs)] == ["new", "mid", "old"]
    assert [j.id for j in filter_and_sort(jobs, sort_by="updated_at", order="asc")] == ["old", "mid", "new"]
    assert [j.id for j in filter_and_sort(jobs, sort_by="createdAt", order="asc")] == ["mid", "old", "new"]

def test_sort_rejects_unknown_field(make_job):
    with pytest.raises(ValueError):
        filter_and_sort([make_job()], sort_by="salary")
    with pytest.raises(ValueError):
        filter_and_sort([make_job()], order="sideways")

def test_activity_series_counts_creations(make_job):
    at = lambda d: datetime(d.year, d.month, d.day, 9, tzinfo=timezone.utc)
    jobs = [
        make_job(created_at=at(TODAY)),
        make_job(created_at=at(TODAY)),
        make_job(created_at=at(TODAY - timedelta(days=13))),
        make_job(created_at=at(TODAY - timedelta(days=14))),
    ]
    series = activity_series(jobs, today=TODAY)
    
    assert len(series) == 14
    assert series[0].date == TODAY - timedelta(days=13)
    assert series[-1].date == TODAY
    assert series[-1].label == "Jun 15"
    assert [p.count for p in series] == [1] + [0] * 12 + [2]

def test_activity_series_empty():
    series = activity_series([], today=TODAY, days=7)
    
    assert len(series) == 7
    assert all(p.count == 0 for p in series)

def test_dashboard_summary(make_job):
    statuses = ["saved", "applied", "interviewing", "offer", "rejected", "accepted", "withdrawn"]
    summary = dashboard_summary([make_job(status=s) for s in statuses])
    
    assert summary.total == 7
    assert summary.active == 5
    assert summary.interviewing == 1
    assert summary.offers == 1

def test_board_columns(make_job):
    jobs = [make_job(status="applied"), make_job(status="accepted"), make_job(status="applied")]
    columns = board_columns(jobs)
    
    assert [c.title for c in columns] == ["Saved", "Applied", "Interviewing", "Offer", "Rejected"]
    assert [len(c.jobs) for c in columns] == [0, 2, 0, 0, 0]
    assert columns[1].jobs[0].id == jobs[0].id

def test_sort_places_accented_names_with_base_letter(make_job):
    jobs = [make_job(company_name=name) for name in ("Zeta", "Émile", "apple", "Eve")]
    
    ordered = filter_and_sort(jobs, sort_by="companyName", order="asc")
    
    assert [j.company_name for j in ordered] == ["apple", "Émile", "Eve", "Zeta"]
