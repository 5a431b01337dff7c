"""Pytest configuration and shared fixtures.

Fixtures are organized by category:
- Graph fixtures: empty graphs and planners
- Execution fixtures: initializers and recording callbacks
- File fixtures: manifest and config writers
"""

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
import yaml

from initplan.config import PlannerConfig, PolicyConfig, TieBreak
from initplan.dependency.graph import DependencyGraph
from initplan.dependency.planner import DependencyPlanner
from initplan.execution.initializer import Initializer

# =============================================================================
# Graph Fixtures
# =============================================================================


@pytest.fixture
def graph() -> DependencyGraph:
    """Create an empty DependencyGraph."""
    return DependencyGraph()


@pytest.fixture
def planner(graph: DependencyGraph) -> DependencyPlanner:
    """Create a planner over the ``graph`` fixture with name tie-break."""
    return DependencyPlanner(graph)


@pytest.fixture
def registration_planner(graph: DependencyGraph) -> DependencyPlanner:
    """Create a planner over the ``graph`` fixture with registration tie-break."""
    return DependencyPlanner(graph, tie_break=TieBreak.REGISTRATION)


# =============================================================================
# Execution Fixtures
# =============================================================================


@pytest.fixture
def context() -> SimpleNamespace:
    """Shared context that records which modules ran, in order."""
    return SimpleNamespace(calls=[])


@pytest.fixture
def recorder() -> Callable[[str], Callable[[SimpleNamespace], None]]:
    """Factory for callbacks that append their module name to ``context.calls``.

    Example:
        def test_something(initializer, recorder):
            initializer.register("a", recorder("a"))
    """

    def make(name: str) -> Callable[[SimpleNamespace], None]:
        def callback(ctx: SimpleNamespace) -> None:
            ctx.calls.append(name)

        return callback

    return make


@pytest.fixture
def initializer(context: SimpleNamespace) -> Initializer[SimpleNamespace]:
    """Initializer bound to the recording ``context`` fixture."""
    return Initializer(context)


@pytest.fixture
def strict_config() -> PlannerConfig:
    """Configuration that forbids re-registration."""
    return PlannerConfig(policy=PolicyConfig(allow_reregister=False))


# =============================================================================
# File Fixtures
# =============================================================================


@pytest.fixture
def write_manifest(tmp_path: Path) -> Callable[..., Path]:
    """Write a manifest file from a list of module dicts and return its path."""

    def write(modules: Any, name: str = "modules.yaml") -> Path:
        path = tmp_path / name
        path.write_text(yaml.safe_dump({"modules": modules}, sort_keys=False))
        return path

    return write


@pytest.fixture
def web_manifest(write_manifest: Callable[..., Path]) -> Path:
    """Manifest for a small web service start-up."""
    return write_manifest(
        [
            {"name": "http", "requires": ["database", "cache"]},
            {"name": "database", "requires": ["config"]},
            {"name": "cache", "requires": "config"},
            {"name": "config"},
            {"name": "metrics", "precede": ["http"]},
        ]
    )
