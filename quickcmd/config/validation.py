"""Validation of raw (camelCase) configuration dicts."""

from dataclasses import dataclass, field
from typing import Any, Optional

from pydantic import ValidationError

from quickcmd.config.schema import ConfigSchema


@dataclass
class ValidationReport:
    valid: bool
    errors: list[str] = field(default_factory=list)
    config: Optional[ConfigSchema] = None

    def to_dict(self) -> dict:
        return {"valid": self.valid, "errors": list(self.errors)}


def validate_config(raw: Any) -> ValidationReport:
    """Check a raw config dict and parse it into a ConfigSchema.

    Semantic checks (missing ids/display names, types without rules,
    duplicate ids) run first so their messages read naturally; then the
    whole document is parsed with pydantic and any field errors appended.
    ``config`` is set only when the report is valid.
    """
    if not isinstance(raw, dict):
        return ValidationReport(valid=False, errors=["Config must be a mapping"])

    errors: list[str] = []
    errors.extend(_check_project_types(raw.get("projectTypes") or []))
    errors.extend(_check_categories(raw.get("categories") or []))

    parsed: Optional[ConfigSchema] = None
    try:
        parsed = ConfigSchema.model_validate(raw)
    except ValidationError as exc:
        for err in exc.errors():
            location = ".".join(str(part) for part in err["loc"])
            errors.append(f"{location}: {err['msg']}")

    if errors:
        return ValidationReport(valid=False, errors=errors)
    return ValidationReport(valid=True, config=parsed)


def _check_project_types(project_types: list) -> list[str]:
    errors: list[str] = []
    seen: set[str] = set()
    for pt in project_types:
        if not isinstance(pt, dict):
            errors.append("Project type entry must be a mapping")
            continue
        type_id = pt.get("id")
        if not type_id:
            errors.append("Project type missing id")
        elif type_id in seen:
            errors.append(f"Duplicate project type id {type_id}")
        else:
            seen.add(type_id)
        if not pt.get("displayName", pt.get("display_name")):
            errors.append(f"Project type {type_id} missing displayName")
        if not pt.get("detectionRules", pt.get("detection_rules")):
            errors.append(f"Project type {type_id} missing detection rules")
    return errors


def _check_categories(categories: list) -> list[str]:
    errors: list[str] = []
    seen: set[str] = set()
    for cat in categories:
        if not isinstance(cat, dict):
            errors.append("Category entry must be a mapping")
            continue
        cat_id = cat.get("id")
        if not cat_id:
            errors.append("Category missing id")
        elif cat_id in seen:
            errors.append(f"Duplicate category id {cat_id}")
        else:
            seen.add(cat_id)
        if not cat.get("displayName", cat.get("display_name")):
            errors.append(f"Category {cat_id} missing displayName")
    return errors
