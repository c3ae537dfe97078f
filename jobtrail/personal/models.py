"""
Personal data models.
"""
from typing import Optional
from pydantic import BaseModel, ConfigDict

class User(BaseModel):
    """Read-only projection of the signed-in user.
    
    The backend owns and authenticates the account; the client never edits it.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    email: str
    avatar: Optional[str] = None
