"""
JSON file implementation of the job repository.
"""
from datetime import datetime, timezone
import json
import logging
import secrets
import shutil
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..personal.models import User
from ..utils.errors import BackendError
from .mapper import Row
from .models import JobStatus, JobType, Priority
from .repository import JobRepository

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("user_id", "company", "position", "job_type", "status")
PROTECTED_COLUMNS = ("id", "user_id", "created_at", "updated_at")

_CONSTRAINTS = {
    "job_type": {t.value for t in JobType},
    "status": {s.value for s in JobStatus},
    "priority": {p.value for p in Priority},
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _parse_timestamp(value: str) -> datetime:
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class JsonJobRepository(JobRepository):
    """Stores job rows and sessions as JSON files in a directory.
    
    Meant for local use and tests; it mirrors the hosted backend's contract,
    including owner-scoped updates and deletes.
    """
    
    def __init__(self, storage_dir: str = "data/active"):
        """Initialize storage.
        
        Args:
            storage_dir: Directory holding ``jobs.json`` and ``sessions.json``
        """
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        
        self.jobs_file = self.storage_dir / "jobs.json"
        self.sessions_file = self.storage_dir / "sessions.json"
        
        # Create empty files if they don't exist
        self.jobs_file.touch(exist_ok=True)
        self.sessions_file.touch(exist_ok=True)
        
        self._load()

    def _load(self):
        """Load rows and sessions from disk."""
        self._rows: List[Row] = self._read(self.jobs_file, [])
        self._sessions: Dict[str, Dict[str, Any]] = self._read(self.sessions_file, {})

    def _read(self, path: Path, empty):
        try:
            if path.stat().st_size == 0:
                return empty
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise BackendError(f"Could not read {path.name}: {e}") from e

    def _write(self, path: Path, data):
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2, default=str)
        except OSError as e:
            raise BackendError(f"Could not write {path.name}: {e}") from e

    def _check_constraints(self, row: Row):
        for column, allowed in _CONSTRAINTS.items():
            if column in row and row[column] not in allowed:
                raise BackendError(f"Invalid value for {column}: {row[column]!r}")

    # Sessions

    def create_session(self, user: User) -> str:
        """Sign a user in and return a new access token."""
        token = secrets.token_urlsafe(24)
        self._sessions[token] = user.model_dump()
        self._write(self.sessions_file, self._sessions)
        logger.info("Opened session for %s", user.email)
        return token

    def end_session(self, token: str):
        """Sign out; unknown tokens are ignored."""
        if self._sessions.pop(token, None) is not None:
            self._write(self.sessions_file, self._sessions)

    async def get_user(self, access_token: Optional[str]) -> Optional[User]:
        if not access_token:
            return None
        data = self._sessions.get(access_token)
        return User(**data) if data else None

    # Jobs

    async def list_jobs(self, user_id: str) -> List[Row]:
        owned = [
            (index, row) for index, row in enumerate(self._rows)
            if row.get("user_id") == user_id
        ]
        owned.sort(
            key=lambda item: (_parse_timestamp(item[1]["created_at"]), item[0]),
            reverse=True
        )
        return [dict(row) for _, row in owned]

    def _check_required(self, row: Row):
        missing = [c for c in REQUIRED_COLUMNS if row.get(c) in (None, "")]
        if missing:
            raise BackendError(f"Missing required columns: {', '.join(missing)}")

    def _commit(self, rows: List[Row]):
        """Write ``rows`` and only then make them current."""
        self._write(self.jobs_file, rows)
        self._rows = rows

    async def insert_job(self, row: Row) -> Row:
        new_row = {k: v for k, v in row.items() if k not in ("id", "created_at", "updated_at")}
        if new_row.get("priority") is None:
            new_row["priority"] = Priority.MEDIUM.value
        self._check_required(new_row)
        self._check_constraints(new_row)
        
        timestamp = _now()
        new_row["id"] = str(uuid.uuid4())
        new_row["created_at"] = timestamp
        new_row["updated_at"] = timestamp
        
        self._commit(self._rows + [new_row])
        logger.debug("Inserted job %s for user %s", new_row["id"], new_row["user_id"])
        return dict(new_row)

    async def update_job(self, job_id: str, user_id: str, changes: Row) -> Row:
        for index, row in enumerate(self._rows):
            if row.get("id") == job_id and row.get("user_id") == user_id:
                break
        else:
            raise BackendError(f"Job {job_id} not found")
        
        updates = {k: v for k, v in changes.items() if k not in PROTECTED_COLUMNS}
        if "priority" in updates and updates["priority"] is None:
            del updates["priority"]
        
        merged = {**row, **updates}
        self._check_required(merged)
        self._check_constraints(updates)
        created = _parse_timestamp(merged["created_at"])
        merged["updated_at"] = max(datetime.now(timezone.utc), created).isoformat()
        
        rows = list(self._rows)
        rows[index] = merged
        self._commit(rows)
        logger.debug("Updated job %s", job_id)
        return dict(merged)

    async def delete_job(self, job_id: str, user_id: str) -> None:
        remaining = [
            row for row in self._rows
            if not (row.get("id") == job_id and row.get("user_id") == user_id)
        ]
        if len(remaining) == len(self._rows):
            logger.debug("Delete of %s matched nothing", job_id)
            return
        self._commit(remaining)
        logger.debug("Deleted job %s", job_id)

    # Backups

    def backup(self, backup_dir: str = "data/backups", max_backups: int = 5) -> Path:
        """Create a backup of all data.
        
        Args:
            backup_dir: Directory to store backups
            max_backups: Maximum number of backups to keep
            
        Returns:
            Path of the new backup directory
        """
        backup_path = Path(backup_dir)
        backup_path.mkdir(parents=True, exist_ok=True)
        
        # Microseconds keep names unique and sortable
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
        target = backup_path / f"backup_{timestamp}"
        suffix = 1
        while target.exists():
            target = backup_path / f"backup_{timestamp}_{suffix:02d}"
            suffix += 1
        target.mkdir()
        
        shutil.copy2(self.jobs_file, target / "jobs.json")
        shutil.copy2(self.sessions_file, target / "sessions.json")
        
        backup_info = {
            "timestamp": timestamp,
            "num_jobs": len(self._rows),
            "num_users": len({row.get("user_id") for row in self._rows}),
            "num_sessions": len(self._sessions),
        }
        with open(target / "backup_info.json", 'w', encoding='utf-8') as f:
            json.dump(backup_info, f, indent=2)
        
        self._cleanup_old_backups(backup_path, max_backups)
        logger.info("Backed up %d jobs to %s", len(self._rows), target)
        return target

    def _cleanup_old_backups(self, backup_dir: Path, max_backups: int):
        """Remove the oldest backups beyond ``max_backups``."""
        backup_dirs = sorted(
            d for d in backup_dir.iterdir() if d.is_dir() and d.name.startswith("backup_")
        )
        while len(backup_dirs) > max_backups:
            shutil.rmtree(backup_dirs.pop(0))

    def restore_from_backup(self, backup_dir: str):
        """Restore data from a backup.
        
        Args:
            backup_dir: Path to backup directory to restore from
        """
        backup_path = Path(backup_dir)
        if not backup_path.exists():
            raise ValueError(f"Backup directory not found: {backup_dir}")
        
        shutil.copy2(backup_path / "jobs.json", self.jobs_file)
        shutil.copy2(backup_path / "sessions.json", self.sessions_file)
        
        self._load()
