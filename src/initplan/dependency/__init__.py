"""Dependency management for initialization ordering."""

from .graph import DependencyGraph, ModuleNode
from .planner import DependencyPlanner, InitPlan

__all__ = [
    "DependencyGraph",
    "ModuleNode",
    "DependencyPlanner",
    "InitPlan",
]
