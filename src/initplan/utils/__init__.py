"""Utility exceptions."""

from .exceptions import (
    AlreadyInitializedError,
    DependencyCycleError,
    DuplicateModuleError,
    InitPlanError,
    ManifestError,
    PlanningError,
    UnknownDependencyError,
)

__all__ = [
    "InitPlanError",
    "PlanningError",
    "UnknownDependencyError",
    "DependencyCycleError",
    "DuplicateModuleError",
    "AlreadyInitializedError",
    "ManifestError",
]
