"""Pydantic models for the detection/catalog configuration.

Config files are written in camelCase (``detectionRules``,
``excludeIfExists``, ...). Models accept either the camelCase alias or the
snake_case field name, and dump back to camelCase with ``by_alias=True``.
"""

from enum import StrEnum
from typing import Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class RuleType(StrEnum):
    """Kinds of atomic probes a detection rule can perform."""

    FILE_EXISTS = "file_exists"
    DIRECTORY_EXISTS = "directory_exists"
    FILE_CONTENT = "file_content"
    CUSTOM = "custom"


# Target token for custom rules meaning "the workspace has any entry at all".
ANY_FILE_TARGET = "*"


class RuleConfig(_ConfigModel):
    pattern: Optional[str] = None
    # any existing path forces a non-match, whatever the rule type
    exclude_if_exists: list[str] = Field(default_factory=list)
    custom_function: Optional[str] = None


class DetectionRule(_ConfigModel):
    """One weighted probe against the workspace.

    A rule contributes either 0 or its full weight. A failing required rule
    vetoes its project type (see ``quickcmd.detector.scorer``).
    """

    name: str = Field(..., min_length=1)
    type: RuleType
    target: str
    weight: int = Field(default=10, gt=0)
    required: bool = False
    config: Optional[RuleConfig] = None


class PackageManagerDefinition(_ConfigModel):
    id: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)
    detection_rules: list[DetectionRule] = Field(default_factory=list)


class ProjectTypeDefinition(_ConfigModel):
    """A named ecosystem and the rules that identify it."""

    id: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)
    aliases: list[str] = Field(default_factory=list)
    priority: int = 0
    detection_rules: list[DetectionRule] = Field(default_factory=list)
    package_managers: list[PackageManagerDefinition] = Field(default_factory=list)

    @property
    def max_possible_score(self) -> int:
        return sum(rule.weight for rule in self.detection_rules)

    def matches_id(self, type_id: str) -> bool:
        """True when ``type_id`` is this type's id or one of its aliases."""
        return type_id == self.id or type_id in self.aliases


class CategoryConditions(_ConfigModel):
    requires_git: bool = False
    requires_docker: bool = False
    required_package_manager: Optional[str] = None
    custom: Optional[str] = None


class CategoryDefinition(_ConfigModel):
    id: str = Field(..., min_length=1)
    display_name: str = Field(..., min_length=1)
    icon: str = "gear"
    supported_project_types: Union[list[str], Literal["*"]] = "*"
    conditions: Optional[CategoryConditions] = None

    @property
    def is_wildcard(self) -> bool:
        return self.supported_project_types == "*"


class CommandConditions(_ConfigModel):
    requires_package_manager: Optional[str] = None
    requires_project_type: Optional[list[str]] = None
    requires_git: bool = False
    requires_docker: bool = False
    custom: Optional[str] = None


class CommandDefinition(_ConfigModel):
    label: str
    command: str
    description: Optional[str] = None
    category: str
    icon: Optional[str] = None
    conditions: Optional[CommandConditions] = None


class DependencyCheck(_ConfigModel):
    """Shell probe deciding whether a category's tool is installed."""

    command: str
    enabled: bool = True
    timeout: Optional[float] = Field(default=None, gt=0)
    description: Optional[str] = None


class ConfigSchema(_ConfigModel):
    version: str = "1.0.0"
    project_types: list[ProjectTypeDefinition] = Field(default_factory=list)
    categories: list[CategoryDefinition] = Field(default_factory=list)
    commands: list[CommandDefinition] = Field(default_factory=list)
    dependency_checks: dict[str, DependencyCheck] = Field(default_factory=dict)
