"""initplan - dependency-ordered start-up initialization."""

from .config import PlannerConfig, TieBreak
from .dependency import DependencyGraph, DependencyPlanner, InitPlan
from .execution import Initializer, InitState
from .utils.exceptions import (
    AlreadyInitializedError,
    DependencyCycleError,
    DuplicateModuleError,
    InitPlanError,
    PlanningError,
    UnknownDependencyError,
)

__version__ = "0.1.0"
__all__ = [
    "Initializer",
    "InitState",
    "DependencyGraph",
    "DependencyPlanner",
    "InitPlan",
    "PlannerConfig",
    "TieBreak",
    "InitPlanError",
    "PlanningError",
    "UnknownDependencyError",
    "DependencyCycleError",
    "DuplicateModuleError",
    "AlreadyInitializedError",
]
