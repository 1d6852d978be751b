"""Pydantic schemas for command endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CommandCreateRequest(BaseModel):
    """Payload for adding a command to the store."""

    label: str = Field(..., min_length=1, description="Short name shown in lists")
    command: str = Field(..., min_length=1, description="Shell command line to run")
    category: str = Field(..., min_length=1, description="Category id, e.g. 'npm' or 'docker'")
    description: Optional[str] = None
    icon: Optional[str] = None


class CommandPatchRequest(BaseModel):
    """Payload for updating a command. Omitted fields are left unchanged."""

    label: Optional[str] = Field(default=None, min_length=1)
    command: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    icon: Optional[str] = None


class CommandResponse(BaseModel):
    model_config = {"from_attributes": True}

    id: int
    label: str
    command: str
    description: Optional[str] = None
    category: str
    icon: Optional[str] = None
    created_at: datetime
    updated_at: datetime
