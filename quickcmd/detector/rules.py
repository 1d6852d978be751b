"""Rule evaluator: one detection rule against one workspace root.

Evaluation is read-only and never raises. Anything that goes wrong while
probing (missing files, permission errors, undecodable content, bad regex,
failing custom predicates) is reported as a non-match with ``details``
describing why.
"""

import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Optional

from quickcmd.config.schema import ANY_FILE_TARGET, DetectionRule, RuleType
from quickcmd.detector.custom import run_custom_function
from quickcmd.detector.types import RuleEvaluation

if TYPE_CHECKING:
    from quickcmd.config.provider import ConfigProvider

logger = logging.getLogger(__name__)

# "/expr/flags" selects regex matching; anything else is a literal substring.
_REGEX_LITERAL = re.compile(r"^/(?P<expr>.+)/(?P<flags>[ims]*)$", re.DOTALL)
_REGEX_FLAGS = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}


def evaluate_rule(
    rule: DetectionRule,
    workspace_root: Path,
    provider: Optional["ConfigProvider"] = None,
) -> RuleEvaluation:
    """Evaluate a single rule. The score is 0 or ``rule.weight``."""
    root = Path(workspace_root)
    try:
        matched, details = _probe(rule, root, provider)
    except (OSError, ValueError, re.error) as exc:
        logger.debug("Rule %s failed on %s: %s", rule.name, root, exc)
        matched, details = False, f"error: {exc}"

    return RuleEvaluation(
        name=rule.name,
        matched=matched,
        score=rule.weight if matched else 0,
        details=details,
    )


def _probe(
    rule: DetectionRule,
    root: Path,
    provider: Optional["ConfigProvider"],
) -> tuple[bool, Optional[str]]:
    excluded_by = _first_existing(root, rule.config.exclude_if_exists if rule.config else [])
    if excluded_by:
        return False, f"excluded by {excluded_by}"

    if rule.type == RuleType.FILE_EXISTS:
        found = (root / rule.target).is_file()
        return found, f"{rule.target} {'found' if found else 'not found'}"

    if rule.type == RuleType.DIRECTORY_EXISTS:
        found = (root / rule.target).is_dir()
        return found, f"{rule.target}/ {'found' if found else 'not found'}"

    if rule.type == RuleType.FILE_CONTENT:
        return _probe_content(rule, root)

    if rule.type == RuleType.CUSTOM:
        return _probe_custom(rule, root, provider)

    return False, f"unsupported rule type {rule.type}"


def _first_existing(root: Path, paths: list[str]) -> Optional[str]:
    for rel in paths:
        if (root / rel).exists():
            return rel
    return None


def _probe_content(rule: DetectionRule, root: Path) -> tuple[bool, Optional[str]]:
    path = root / rule.target
    if not path.is_file():
        return False, f"{rule.target} not found"

    content = path.read_text(encoding="utf-8")
    pattern = rule.config.pattern if rule.config else None
    if not pattern:
        return True, f"{rule.target} readable"

    matched = content_matches(content, pattern)
    return matched, f"pattern {'matched' if matched else 'not matched'} in {rule.target}"


def content_matches(content: str, pattern: str) -> bool:
    """Match ``pattern`` against text.

    ``/expr/flags`` is a regex searched anywhere in the text; any other
    pattern must appear verbatim.
    """
    literal = _REGEX_LITERAL.match(pattern)
    if literal is None:
        return pattern in content

    flags = 0
    for flag in literal.group("flags"):
        flags |= _REGEX_FLAGS[flag]
    return re.search(literal.group("expr"), content, flags) is not None


def _probe_custom(
    rule: DetectionRule,
    root: Path,
    provider: Optional["ConfigProvider"],
) -> tuple[bool, Optional[str]]:
    if rule.target == ANY_FILE_TARGET:
        found = root.is_dir() and any(root.iterdir())
        return found, "workspace has entries" if found else "workspace is empty"

    name = (rule.config.custom_function if rule.config else None) or rule.target
    if provider is None:
        matched = run_custom_function(name, root)
        return matched, f"custom function {name} returned {matched}"

    try:
        matched = bool(provider.execute_custom_function(name, root))
    except Exception as exc:
        logger.warning("Error executing custom function %s: %s", name, exc)
        return False, f"custom function {name} failed: {exc}"
    return matched, f"custom function {name} returned {matched}"
