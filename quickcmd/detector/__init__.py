"""Detector module: weighted, config-driven project-type detection.

Public API:
    ProjectDetector(provider, settings).detect_project() -> ProjectDetectionResult

Import the orchestrator from ``quickcmd.detector.orchestrator``; this
package only re-exports the result types.
"""

from quickcmd.detector.types import (
    DetectedPackageManager,
    DetectedProjectType,
    DetectionStrategy,
    ProjectDetectionResult,
    ProjectScript,
    ProjectTypeScore,
    RuleEvaluation,
)

__all__ = [
    "DetectedPackageManager",
    "DetectedProjectType",
    "DetectionStrategy",
    "ProjectDetectionResult",
    "ProjectScript",
    "ProjectTypeScore",
    "RuleEvaluation",
]
