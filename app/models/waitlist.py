from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import List, Optional
from datetime import datetime


class WaitlistCreate(BaseModel):
    """Signup request body"""
    model_config = ConfigDict(populate_by_name=True)

    email: EmailStr
    wait_list_code: Optional[str] = Field(default=None, alias="waitListCode")
    preferences: Optional[List[str]] = None


class WaitlistEntry(BaseModel):
    """A stored waitlist entry"""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    email: str
    wait_list_code: str = Field(default="", alias="waitListCode")
    preferences: List[str] = Field(default_factory=list)
    created_at: datetime = Field(alias="createdAt")


class DeleteResponse(BaseModel):
    status: str = "ok"
