"""Shared types for the detector module.

Every detection pass produces a ProjectDetectionResult, which carries the
surviving project types, resolved package managers and the full per-rule
trace. ``to_dict()`` output uses the same camelCase keys as config files.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Optional

# Synthetic type reported when nothing was detected.
UNKNOWN_PROJECT_TYPE = "unknown"


class DetectionStrategy(StrEnum):
    """Policy for narrowing ranked project types to the detected set."""

    AGGRESSIVE = "aggressive"
    CONSERVATIVE = "conservative"
    BALANCED = "balanced"


@dataclass
class RuleEvaluation:
    """Outcome of one rule. Score is either 0 or the rule's full weight."""

    name: str
    matched: bool
    score: int
    details: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "matched": self.matched,
            "score": self.score,
            "details": self.details,
        }


@dataclass
class ProjectTypeScore:
    """Aggregated score of one project type, with its rule trace.

    required_failed is True when the type declares required rules and none
    of them matched; score is then forced to 0.
    """

    id: str
    display_name: str
    priority: int
    score: int
    max_possible_score: int
    required_failed: bool = False
    rules: list[RuleEvaluation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "priority": self.priority,
            "score": self.score,
            "maxPossibleScore": self.max_possible_score,
            "requiredFailed": self.required_failed,
            "rules": [r.to_dict() for r in self.rules],
        }


@dataclass
class ProjectScript:
    """A runnable command derived from the workspace (package.json scripts, etc.)."""

    name: str
    command: str

    def to_dict(self) -> dict:
        return {"name": self.name, "command": self.command}


@dataclass
class DetectedProjectType:
    id: str
    display_name: str
    score: int
    confidence: int  # 0 to 100
    scripts: list[ProjectScript] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "score": self.score,
            "confidence": self.confidence,
            "scripts": [s.to_dict() for s in self.scripts],
        }


@dataclass
class DetectedPackageManager:
    id: str
    display_name: str
    project_type: str
    score: int

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "displayName": self.display_name,
            "projectType": self.project_type,
            "score": self.score,
        }


@dataclass
class ProjectDetectionResult:
    """Complete detection output for one workspace root.

    package_manager / python_manager are a lossy projection of
    detected_package_managers: only the single best manager is surfaced,
    and only when it belongs to the JS or Python set.
    """

    workspace_root: str = ""
    types: list[str] = field(default_factory=lambda: [UNKNOWN_PROJECT_TYPE])
    detected_project_types: list[DetectedProjectType] = field(default_factory=list)
    detected_package_managers: list[DetectedPackageManager] = field(default_factory=list)
    package_manager: Optional[str] = None
    python_manager: Optional[str] = None
    has_git: bool = False
    has_docker: bool = False
    strategy: Optional[DetectionStrategy] = None
    detection_details: list[ProjectTypeScore] = field(default_factory=list)

    @property
    def is_unknown(self) -> bool:
        return self.types == [UNKNOWN_PROJECT_TYPE]

    def get_project_type(self, type_id: str) -> Optional[DetectedProjectType]:
        for detected in self.detected_project_types:
            if detected.id == type_id:
                return detected
        return None

    def scripts_for(self, type_id: str) -> list[ProjectScript]:
        detected = self.get_project_type(type_id)
        return list(detected.scripts) if detected else []

    def to_dict(self) -> dict:
        return {
            "workspaceRoot": self.workspace_root,
            "types": list(self.types),
            "detectedProjectTypes": [t.to_dict() for t in self.detected_project_types],
            "detectedPackageManagers": [p.to_dict() for p in self.detected_package_managers],
            "packageManager": self.package_manager,
            "pythonManager": self.python_manager,
            "hasGit": self.has_git,
            "hasDocker": self.has_docker,
            "strategy": self.strategy.value if self.strategy else None,
            "detectionDetails": [d.to_dict() for d in self.detection_details],
        }


def empty_result(workspace_root: str = "") -> ProjectDetectionResult:
    """The result used when there is no workspace or nothing was detected."""
    return ProjectDetectionResult(workspace_root=workspace_root)
