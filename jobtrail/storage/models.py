"""
Data models for job applications.
"""
from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

class JobStatus(str, Enum):
    """Pipeline stage of an application."""
    SAVED = "saved"
    APPLIED = "applied"
    INTERVIEWING = "interviewing"
    OFFER = "offer"
    REJECTED = "rejected"
    ACCEPTED = "accepted"

class JobType(str, Enum):
    """Type of employment."""
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    CONTRACT = "contract"
    FREELANCE = "freelance"
    INTERNSHIP = "internship"

class Priority(str, Enum):
    """How much the user cares about an application."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

# Fields a client may never write
IMMUTABLE_FIELDS = frozenset({"id", "created_at", "updated_at"})

class ViewModel(BaseModel):
    """Base for models exposed to the presentation layer.
    
    Attributes are snake_case; ``model_dump(by_alias=True)`` yields the
    camelCase view shape (``companyName``, ``followUpDate``...). Input is
    accepted under either name.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=False,
    )

class JobDraft(ViewModel):
    """Fields supplied when adding a new application."""
    company_name: str
    position: str
    job_type: JobType
    status: JobStatus = JobStatus.SAVED
    priority: Optional[Priority] = None  # backend defaults to medium
    application_link: Optional[str] = None
    salary: Optional[str] = None
    notes: Optional[str] = None
    deadline: Optional[date] = None
    follow_up_date: Optional[date] = None
    location: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

class JobUpdate(ViewModel):
    """Partial change to an application; only explicitly set fields apply."""
    model_config = ConfigDict(extra="ignore")

    company_name: Optional[str] = None
    position: Optional[str] = None
    job_type: Optional[JobType] = None
    status: Optional[JobStatus] = None
    priority: Optional[Priority] = None
    application_link: Optional[str] = None
    salary: Optional[str] = None
    notes: Optional[str] = None
    deadline: Optional[date] = None
    follow_up_date: Optional[date] = None
    location: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    tags: Optional[List[str]] = None

    @field_validator("company_name", "position", "job_type", "status", mode="before")
    @classmethod
    def _required_not_cleared(cls, value):
        # Absent means unchanged; these columns can never be emptied
        if value is None:
            raise ValueError("field is required and cannot be cleared")
        return value

class JobApplication(ViewModel):
    """Job application as held by the store."""
    id: str
    company_name: str
    position: str
    job_type: JobType
    # Rows with a status outside the pipeline still load; views bucket them.
    status: Union[JobStatus, str] = Field(union_mode="left_to_right")
    priority: Priority = Priority.MEDIUM
    application_link: Optional[str] = None
    salary: Optional[str] = None
    notes: Optional[str] = None
    deadline: Optional[date] = None
    follow_up_date: Optional[date] = None
    location: Optional[str] = None
    contact_name: Optional[str] = None
    contact_email: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @property
    def status_value(self) -> str:
        """Raw status string, known or not."""
        return self.status.value if isinstance(self.status, JobStatus) else str(self.status)

    @property
    def is_known_status(self) -> bool:
        return isinstance(self.status, JobStatus)
