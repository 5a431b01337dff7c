"""Dependency Graph - registration of modules and transitive requirement closure.

Each module is a named initialization step with a callback and a list of
"requires" edges (modules that must run before it). A "precede" declaration is
the inverse: registering ``a`` with ``precede=["b"]`` appends ``a`` to the
requires list of ``b``. Once recorded the two kinds of edge are merged.

Nothing is validated at registration time. Forward references are allowed as
long as every referenced module is registered before planning. Validation
happens in DependencyPlanner.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

import structlog

from ..utils.exceptions import DependencyCycleError, DuplicateModuleError

logger = structlog.get_logger(__name__)

Callback = Callable[[Any], Any]


def _dot_id(name: str) -> str:
    escaped = name.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


@dataclass
class ModuleNode:
    """
    Registration record for one module.

    Attributes:
        name: Module identifier
        sequence: Position at which the graph first saw this name
        callback: Initialization callback, None until the module is registered
        requires: Direct requirements, in declaration order, duplicates allowed
        precede_origins: Modules whose precede declarations created edges on this node
    """

    name: str
    sequence: int
    callback: Callback | None = None
    requires: list[str] = field(default_factory=list)
    precede_origins: list[str] = field(default_factory=list)

    @property
    def registered(self) -> bool:
        return self.callback is not None


class DependencyGraph:
    """
    Registry of modules and their requires edges.

    Features:
    - Last-callback-wins registration with accumulating edges
    - Precede declarations stored as reversed requires edges
    - Memoized depth-first closure with on-stack cycle detection
    - Graphviz DOT export
    """

    def __init__(self, allow_reregister: bool = True) -> None:
        """
        Initialize an empty graph.

        Args:
            allow_reregister: When False, registering a name twice raises DuplicateModuleError
        """
        self.nodes: dict[str, ModuleNode] = {}
        self.allow_reregister = allow_reregister

    def _node(self, name: str) -> ModuleNode:
        node = self.nodes.get(name)
        if node is None:
            node = ModuleNode(name=name, sequence=len(self.nodes))
            self.nodes[name] = node
        return node

    def register(
        self,
        module: str,
        callback: Callback,
        precede: Iterable[str] = (),
        *requires: str,
    ) -> None:
        """
        Register a module.

        Args:
            module: Module name
            callback: Called with the shared context when the module runs
            precede: Modules that must run after this one
            *requires: Modules that must run before this one

        Raises:
            ValueError: If the module name is empty or the callback is not callable
            DuplicateModuleError: If the name is already registered and re-registration is off
        """
        if not isinstance(module, str) or not module.strip():
            raise ValueError("module name must be a non-empty string")
        if not callable(callback):
            raise ValueError(f"callback for module '{module}' must be callable")
        precede = (precede,) if isinstance(precede, str) else tuple(precede)

        node = self._node(module)
        if node.registered:
            if not self.allow_reregister:
                raise DuplicateModuleError(module)
            logger.warning(
                "Module re-registered, replacing callback and appending requirements",
                module=module,
            )

        node.callback = callback
        node.requires.extend(requires)

        for target in precede:
            target_node = self._node(target)
            target_node.requires.append(module)
            target_node.precede_origins.append(module)

        logger.debug(
            "Registered module",
            module=module,
            requires=list(requires),
            precede=list(precede),
        )

    @property
    def modules(self) -> list[str]:
        """All known module names (registered or only referenced by precede), in first-seen order."""
        return list(self.nodes)

    def __contains__(self, module: object) -> bool:
        return module in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def has_callback(self, module: str) -> bool:
        node = self.nodes.get(module)
        return node is not None and node.registered

    def callback(self, module: str) -> Callback:
        """
        Return the callback registered for a module.

        Raises:
            KeyError: If the module has no callback
        """
        node = self.nodes.get(module)
        if node is None or node.callback is None:
            raise KeyError(module)
        return node.callback

    def requires(self, module: str) -> list[str]:
        """Direct requirements of a module (copy), empty for unknown names."""
        node = self.nodes.get(module)
        return list(node.requires) if node else []

    def precede_origins(self, module: str) -> list[str]:
        node = self.nodes.get(module)
        return list(node.precede_origins) if node else []

    def sequence(self, module: str) -> int:
        return self.nodes[module].sequence

    def closure(self, module: str, cache: dict[str, tuple[str, ...]]) -> tuple[str, ...]:
        """
        Compute the transitive requirements of a module.

        For each direct requirement ``r`` in declaration order, the closure of
        ``r`` comes first and ``r`` itself after it. Duplicates keep their first
        position. Results are stored in ``cache`` so a shared requirement is
        expanded at most once per planning pass.

        Modules that were never seen have an empty closure; reporting them is
        the planner's job.

        The walk keeps its own stack of partially expanded modules, so chain
        length is not bounded by the interpreter's recursion limit.

        Args:
            module: Module to expand
            cache: Pass-scoped memo, keyed by module name

        Returns:
            Deduplicated tuple of all transitive requirements

        Raises:
            DependencyCycleError: If expansion re-enters a module still being expanded
        """
        cached = cache.get(module)
        if cached is not None:
            return cached

        on_stack: set[str] = set()
        frames: list[tuple[str, Iterator[str], dict[str, None]]] = []

        def enter(name: str) -> bool:
            node = self.nodes.get(name)
            if node is None or not node.requires:
                cache[name] = ()
                return False
            on_stack.add(name)
            frames.append((name, iter(node.requires), {}))
            return True

        def merge(expanded: dict[str, None], req: str) -> None:
            for dep in cache[req]:
                expanded.setdefault(dep, None)
            expanded.setdefault(req, None)

        if not enter(module):
            return ()

        while frames:
            name, pending, expanded = frames[-1]
            descended = False
            for req in pending:
                if req in on_stack:
                    raise DependencyCycleError(name, req)
                if req not in cache and enter(req):
                    descended = True
                    break
                merge(expanded, req)
            if descended:
                continue

            frames.pop()
            on_stack.discard(name)
            cache[name] = tuple(expanded)
            if frames:
                merge(frames[-1][2], name)

        return cache[module]

    def to_dot(self) -> str:
        """
        Generate DOT format representation of the direct requires edges.

        Returns:
            String containing the Graphviz DOT definition
        """
        lines = ["digraph InitGraph {"]
        lines.append("    rankdir=LR;")
        lines.append("    node [shape=box style=filled];")

        for node in self.nodes.values():
            # Referenced but never registered modules are highlighted
            color = "#d4edda" if node.registered else "#f8d7da"
            name = _dot_id(node.name)
            lines.append(f'    {name} [fillcolor="{color}"];')

            for dep in dict.fromkeys(node.requires):
                lines.append(f"    {_dot_id(dep)} -> {name};")

        lines.append("}")
        return "\n".join(lines)
