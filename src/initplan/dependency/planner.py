"""Dependency Planner - validate the module graph and produce a total order.

Overview:
--------
The DependencyPlanner turns a populated DependencyGraph into a single
initialization order in which every module comes after everything it
(transitively) requires.

Planning Pass:
-------------
1. Compute the closure of every module with a fresh memo cache
2. Unknown check: every closure member must have a callback
3. Cycle check: no two modules may appear in each other's closure
4. Order every known module

Ordering:
--------
Modules are first sorted by the tie-break key (name or registration
sequence), then stable-sorted by depth:

  depth(m) = 0                                  if m requires nothing
  depth(m) = 1 + max(depth(r) for r in requires(m))

If ``a`` is in the closure of ``b`` then depth(a) < depth(b), so the result
always respects every closure edge. Modules of equal depth keep the tie-break
order, which makes the plan reproducible across runs and independent of
registration order whenever the valid order is unique.

Example:
-------
  config   (depth 0)
  database (depth 1, requires config)
  cache    (depth 1, requires config)
  http     (depth 2, requires database, cache)

  Plan: [config, cache, database, http]
  Batches: [[config], [cache, database], [http]]
"""

from collections import deque
from dataclasses import dataclass, field

import structlog

from ..config import TieBreak
from ..utils.exceptions import DependencyCycleError, UnknownDependencyError
from .graph import DependencyGraph

logger = structlog.get_logger(__name__)


@dataclass
class InitPlan:
    """
    Result of a planning pass.

    Attributes:
        order: Module names in execution order
        depths: Dependency depth of every module
        closures: Transitive requirements of every module
    """

    order: list[str] = field(default_factory=list)
    depths: dict[str, int] = field(default_factory=dict)
    closures: dict[str, tuple[str, ...]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.order)

    @property
    def batches(self) -> list[list[str]]:
        """Plan grouped by depth. Informational only; execution stays serial."""
        grouped: dict[int, list[str]] = {}
        for module in self.order:
            grouped.setdefault(self.depths[module], []).append(module)
        return [grouped[depth] for depth in sorted(grouped)]


class DependencyPlanner:
    """
    Plan the initialization order of the modules in a DependencyGraph.

    Planning has no side effects besides its own pass-scoped cache, so it can be
    repeated and always returns the same result for the same registrations.
    """

    def __init__(self, graph: DependencyGraph, tie_break: TieBreak = TieBreak.NAME) -> None:
        """
        Initialize the planner.

        Args:
            graph: Graph to plan
            tie_break: Ordering rule for modules that do not depend on each other
        """
        self.graph = graph
        self.tie_break = TieBreak(tie_break)

    def _tie_break_order(self) -> list[str]:
        if self.tie_break == TieBreak.REGISTRATION:
            return sorted(self.graph.modules, key=self.graph.sequence)
        return sorted(self.graph.modules)

    def _check_unknown(self, modules: list[str], closures: dict[str, tuple[str, ...]]) -> None:
        for module in modules:
            for dep in closures[module]:
                if not self.graph.has_callback(dep):
                    raise UnknownDependencyError(module, dep)

            if not self.graph.has_callback(module):
                # Only precede declarations create nodes without a callback
                origins = self.graph.precede_origins(module)
                raise UnknownDependencyError(origins[0], module, precede=True)

    def _check_cycles(self, modules: list[str], closures: dict[str, tuple[str, ...]]) -> None:
        members = {module: set(deps) for module, deps in closures.items()}
        for module in modules:
            for dep in closures[module]:
                if module in members.get(dep, ()):
                    raise DependencyCycleError(module, dep)

    def _depths(self, modules: list[str]) -> dict[str, int]:
        indegree: dict[str, int] = {module: 0 for module in modules}
        outgoing: dict[str, list[str]] = {module: [] for module in modules}

        for module in modules:
            for req in self.graph.requires(module):
                indegree[module] += 1
                outgoing[req].append(module)

        depths = {module: 0 for module in modules if indegree[module] == 0}
        queue = deque(depths)

        while queue:
            current = queue.popleft()
            for target in outgoing[current]:
                depths[target] = max(depths.get(target, 0), depths[current] + 1)
                indegree[target] -= 1
                if indegree[target] == 0:
                    queue.append(target)

        return depths

    def analyze(self) -> InitPlan:
        """
        Run a full planning pass.

        Returns:
            InitPlan with order, depths and closures

        Raises:
            UnknownDependencyError: If a required module has no callback
            DependencyCycleError: If two modules require each other, directly or not
        """
        modules = self._tie_break_order()

        cache: dict[str, tuple[str, ...]] = {}
        closures = {module: self.graph.closure(module, cache) for module in modules}

        self._check_unknown(modules, closures)
        self._check_cycles(modules, closures)

        # Acyclic and fully known from here on, so every module gets a depth
        depths = self._depths(modules)

        order = sorted(modules, key=depths.__getitem__)

        logger.info(
            "Planned initialization order",
            modules=len(order),
            max_depth=max(depths.values()) if depths else 0,
            tie_break=self.tie_break.value,
        )
        logger.debug("Initialization order", order=order)

        return InitPlan(order=order, depths=depths, closures=closures)

    def plan(self) -> list[str]:
        """
        Return the module names in initialization order.

        Raises:
            UnknownDependencyError: If a required module has no callback
            DependencyCycleError: If two modules require each other, directly or not
        """
        return self.analyze().order

    def batches(self) -> list[list[str]]:
        """Return the plan grouped by dependency depth."""
        return self.analyze().batches
