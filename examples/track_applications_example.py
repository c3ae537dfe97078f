"""
Example script tracking a few applications against the local JSON backend.

Optional environment variables in .env:
- JOBTRAIL_STORAGE_DIR: Where job data is stored (default: data/active)
- JOBTRAIL_LOG_LEVEL: Logging level (default: INFO)
- JOBTRAIL_LOG_FILE: Also log to this file
"""
import asyncio
from datetime import date, timedelta

from jobtrail.dashboard.views import dashboard_summary, status_counts, upcoming_deadlines
from jobtrail.interfaces.session import Session
from jobtrail.personal.models import User
from jobtrail.storage.json_store import JsonJobRepository
from jobtrail.utils.config import Config
from jobtrail.utils.logger import setup_logger

async def main():
    config = Config(".env")
    setup_logger("jobtrail", log_file=config.log_file, level=config.log_level)

    repository = JsonJobRepository(config.storage_dir)
    token = repository.create_session(User(id="demo-user", name="Demo", email="demo@example.com"))

    async with await Session.open(repository, token) as session:
        store = session.store
        await store.fetch_all()

        if not store.jobs:
            await store.add({
                "companyName": "Acme",
                "position": "Backend Engineer",
                "jobType": "full-time",
                "status": "applied",
                "salary": "$120,000",
                "deadline": date.today() + timedelta(days=3),
                "tags": ["python", "remote"],
            })
            await store.add({
                "companyName": "Globex",
                "position": "Data Analyst",
                "jobType": "contract",
                "status": "saved",
                "followUpDate": date.today(),
            })

        summary = dashboard_summary(store.jobs)
        print(f"\n{summary.total} applications, {summary.active} active, {summary.offers} offers")

        print("\nBy status:")
        for count in status_counts(store.jobs):
            print(f"  {count.name}: {count.value}")

        print("\nUpcoming:")
        for entry in upcoming_deadlines(store.jobs):
            print(f"  {entry.label:>14}  {entry.title}: {entry.position} @ {entry.company_name}")

    repository.end_session(token)

if __name__ == "__main__":
    asyncio.run(main())
