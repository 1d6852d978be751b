"""Tests for the rule evaluator.

Every probe runs against a tmp_path workspace; none may raise.
"""

from pathlib import Path

import pytest

from quickcmd.config.schema import DetectionRule
from quickcmd.detector.rules import content_matches, evaluate_rule


def _rule(**kwargs) -> DetectionRule:
    kwargs.setdefault("name", "probe")
    kwargs.setdefault("weight", 25)
    return DetectionRule.model_validate(kwargs)


class _RaisingProvider:
    def execute_custom_function(self, name, workspace_root):
        raise RuntimeError("boom")


class TestFileAndDirectoryRules:
    def test_file_exists_matches_with_full_weight(self, tmp_path: Path) -> None:
        (tmp_path / "go.mod").write_text("module x\n")
        result = evaluate_rule(_rule(type="file_exists", target="go.mod"), tmp_path)
        assert result.matched is True
        assert result.score == 25

    def test_missing_file_scores_zero(self, tmp_path: Path) -> None:
        result = evaluate_rule(_rule(type="file_exists", target="go.mod"), tmp_path)
        assert result.matched is False
        assert result.score == 0

    def test_file_rule_does_not_match_directory(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        assert not evaluate_rule(_rule(type="file_exists", target="src"), tmp_path).matched
        assert evaluate_rule(_rule(type="directory_exists", target="src"), tmp_path).matched

    def test_directory_rule_does_not_match_file(self, tmp_path: Path) -> None:
        (tmp_path / ".git").write_text("gitdir: ../.git/worktrees/x\n")
        assert not evaluate_rule(_rule(type="directory_exists", target=".git"), tmp_path).matched

    def test_exclude_if_exists_forces_non_match(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}")
        (tmp_path / "yarn.lock").write_text("")
        rule = _rule(
            type="file_exists",
            target="package.json",
            config={"excludeIfExists": ["pnpm-lock.yaml", "yarn.lock"]},
        )
        result = evaluate_rule(rule, tmp_path)
        assert result.matched is False
        assert result.score == 0
        assert "yarn.lock" in result.details

    def test_exclude_if_exists_ignored_when_absent(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}")
        rule = _rule(type="file_exists", target="package.json", config={"excludeIfExists": ["yarn.lock"]})
        assert evaluate_rule(rule, tmp_path).matched

    def test_missing_workspace_is_a_non_match(self, tmp_path: Path) -> None:
        result = evaluate_rule(_rule(type="file_exists", target="go.mod"), tmp_path / "nope")
        assert result.matched is False


class TestFileContentRules:
    def test_literal_pattern_is_not_a_regex(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.ruff]\nline-length = 100\n")
        rule = _rule(type="file_content", target="pyproject.toml", config={"pattern": "[tool.poetry]"})
        # As a regex "[tool.poetry]" would match the single character "t".
        assert evaluate_rule(rule, tmp_path).matched is False

    def test_literal_pattern_matches_substring(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.poetry]\nname = "x"\n')
        rule = _rule(type="file_content", target="pyproject.toml", config={"pattern": "[tool.poetry]"})
        assert evaluate_rule(rule, tmp_path).matched is True

    def test_regex_literal_with_flags(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text('{"packageManager": "PNPM@9.1.0"}')
        rule = _rule(
            type="file_content",
            target="package.json",
            config={"pattern": r'/"packageManager"\s*:\s*"pnpm@/i'},
        )
        assert evaluate_rule(rule, tmp_path).matched is True

    def test_missing_pattern_matches_readable_file(self, tmp_path: Path) -> None:
        (tmp_path / "Makefile").write_text("all:\n\techo hi\n")
        assert evaluate_rule(_rule(type="file_content", target="Makefile"), tmp_path).matched

    def test_undecodable_file_is_non_match(self, tmp_path: Path) -> None:
        (tmp_path / "blob.txt").write_bytes(b"\xff\xfe\xfa\x00")
        rule = _rule(type="file_content", target="blob.txt", config={"pattern": "x"})
        result = evaluate_rule(rule, tmp_path)
        assert result.matched is False
        assert result.details.startswith("error:")

    def test_invalid_regex_is_non_match(self, tmp_path: Path) -> None:
        (tmp_path / "a.txt").write_text("(((")
        rule = _rule(type="file_content", target="a.txt", config={"pattern": "/(/"})
        assert evaluate_rule(rule, tmp_path).matched is False

    def test_missing_file_is_non_match(self, tmp_path: Path) -> None:
        rule = _rule(type="file_content", target="a.txt", config={"pattern": "x"})
        assert evaluate_rule(rule, tmp_path).matched is False

    def test_exclude_if_exists_applies_to_content_rules(self, tmp_path: Path) -> None:
        (tmp_path / "pyproject.toml").write_text('[tool.poetry]\nname = "x"\n')
        (tmp_path / "uv.lock").write_text("")
        rule = _rule(
            type="file_content",
            target="pyproject.toml",
            config={"pattern": "[tool.poetry]", "excludeIfExists": ["uv.lock"]},
        )
        result = evaluate_rule(rule, tmp_path)
        assert result.matched is False
        assert result.details == "excluded by uv.lock"


class TestCustomRules:
    def test_star_target_requires_non_empty_workspace(self, tmp_path: Path) -> None:
        rule = _rule(type="custom", target="*")
        assert evaluate_rule(rule, tmp_path).matched is False
        (tmp_path / "README").write_text("hi")
        assert evaluate_rule(rule, tmp_path).matched is True

    def test_named_function_from_registry(self, tmp_path: Path) -> None:
        (tmp_path / "main.py").write_text("print('hi')\n")
        rule = _rule(type="custom", target="ignored", config={"customFunction": "has_python_sources"})
        assert evaluate_rule(rule, tmp_path).matched is True

    def test_target_used_when_no_function_configured(self, tmp_path: Path) -> None:
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "main.cpp").write_text("int main() {}\n")
        assert evaluate_rule(_rule(type="custom", target="has_native_sources"), tmp_path).matched

    def test_unknown_function_is_non_match(self, tmp_path: Path) -> None:
        assert evaluate_rule(_rule(type="custom", target="no_such_function"), tmp_path).matched is False

    def test_exclude_if_exists_applies_to_custom_rules(self, tmp_path: Path) -> None:
        (tmp_path / "README").write_text("hi")
        (tmp_path / ".quickcmdignore").write_text("")
        rule = _rule(type="custom", target="*", config={"excludeIfExists": [".quickcmdignore"]})
        assert evaluate_rule(rule, tmp_path).matched is False

    def test_provider_errors_are_non_match(self, tmp_path: Path) -> None:
        result = evaluate_rule(_rule(type="custom", target="anything"), tmp_path, _RaisingProvider())
        assert result.matched is False
        assert result.score == 0


@pytest.mark.parametrize(
    "content,pattern,expected",
    [
        ("hello world", "world", True),
        ("hello world", "/^world/", False),
        ("hello\nworld", "/^world/m", True),
        ("Hello", "/hello/", False),
        ("Hello", "/hello/i", True),
        ("a/b", "a/b", True),
    ],
)
def test_content_matches(content: str, pattern: str, expected: bool) -> None:
    assert content_matches(content, pattern) is expected
