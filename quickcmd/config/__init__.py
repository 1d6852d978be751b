"""Configuration: schema, built-in defaults and the per-workspace provider."""

from quickcmd.config.provider import ConfigError, ConfigProvider
from quickcmd.config.schema import (
    CategoryDefinition,
    CommandDefinition,
    ConfigSchema,
    DetectionRule,
    ProjectTypeDefinition,
)
from quickcmd.config.validation import ValidationReport, validate_config

__all__ = [
    "CategoryDefinition",
    "CommandDefinition",
    "ConfigError",
    "ConfigProvider",
    "ConfigSchema",
    "DetectionRule",
    "ProjectTypeDefinition",
    "ValidationReport",
    "validate_config",
]
