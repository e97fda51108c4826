"""
Pydantic request/response models for the contacts API.

Incoming fields are all optional strings so that missing values reach the
field validator in ``contactbook.validation`` and come back as per-field
messages instead of a framework error.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ContactCreate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    phone: str
    created_at: datetime


class ContactPage(BaseModel):
    """One page of contacts plus the counters the pager needs."""

    model_config = ConfigDict(populate_by_name=True)

    contacts: List[ContactOut] = Field(default_factory=list)
    total: int = 0
    total_pages: int = Field(0, alias="totalPages")
    current_page: int = Field(1, alias="currentPage")
