"""Types shared by the command filter, manager and API."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from pydantic import BaseModel

DEFAULT_CATEGORY_ICON = "gear"


class UserCommand(BaseModel):
    """A stored command, read from the ``user_commands`` table."""

    model_config = {"from_attributes": True}

    id: int
    label: str
    command: str
    description: Optional[str] = None
    category: str
    icon: Optional[str] = None
    created_at: datetime
    updated_at: datetime


@dataclass
class CategoryDisplayInfo:
    display_name: str
    icon: str = DEFAULT_CATEGORY_ICON

    def to_dict(self) -> dict:
        return {"displayName": self.display_name, "icon": self.icon}


@dataclass
class SuggestedCategory:
    id: str
    priority: float

    def to_dict(self) -> dict:
        return {"id": self.id, "priority": self.priority}


@dataclass
class ProjectTypeStats:
    """How many configured categories the detected project supports."""

    total_categories: int = 0
    supported_categories: int = 0
    unsupported_categories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "totalCategories": self.total_categories,
            "supportedCategories": self.supported_categories,
            "unsupportedCategories": list(self.unsupported_categories),
        }


@dataclass
class ProjectStats(ProjectTypeStats):
    """Category support counts plus a summary of the detected project."""

    project_types: list[str] = field(default_factory=list)
    package_manager: Optional[str] = None
    python_manager: Optional[str] = None
    has_git: bool = False
    has_docker: bool = False

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "projectTypes": list(self.project_types),
            "packageManager": self.package_manager,
            "pythonManager": self.python_manager,
            "hasGit": self.has_git,
            "hasDocker": self.has_docker,
        }
