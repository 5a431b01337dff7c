"""Initializer - run module callbacks in dependency order against a shared context.

Lifecycle:
---------
  PENDING --init()--> RUNNING --all callbacks returned--> DONE
                         |
                         +--a callback raised--> FAILED

init() only runs from PENDING. A planning error leaves the state at PENDING
and no callback is invoked, so a corrected registration set can be retried.
Any later call raises AlreadyInitializedError.

Each Initializer owns its own graph and context. There is no process-wide
registry.
"""

from collections.abc import Callable, Iterable
from enum import Enum
from types import SimpleNamespace
from typing import Any, Generic, TypeVar

import structlog

from ..config import PlannerConfig
from ..dependency.graph import DependencyGraph
from ..dependency.planner import DependencyPlanner, InitPlan
from ..utils.exceptions import AlreadyInitializedError

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class InitState(str, Enum):
    """Execution state of an Initializer."""

    PENDING = "pending"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


class Initializer(Generic[T]):
    """
    Dependency-ordered start-up runner.

    Usage:
        init = Initializer(AppContext())
        init.register("config", load_config)
        init.register("database", open_database, (), "config")
        init.register("metrics", start_metrics, ["http"])
        init.register("http", start_http, (), "database")
        init.init()
    """

    def __init__(
        self,
        context: T | None = None,
        *,
        context_factory: Callable[[], T] | None = None,
        config: PlannerConfig | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            context: Shared context passed to every callback
            context_factory: Builds the context when ``context`` is None
                (default: an empty SimpleNamespace)
            config: Planner configuration (default: PlannerConfig())
        """
        self.config = config or PlannerConfig()

        if context is None:
            factory: Callable[[], Any] = context_factory or SimpleNamespace
            context = factory()
        self._context: T = context

        self.graph = DependencyGraph(allow_reregister=self.config.policy.allow_reregister)
        self.planner = DependencyPlanner(self.graph, tie_break=self.config.policy.tie_break)
        self._state = InitState.PENDING

    @property
    def context(self) -> T:
        return self._context

    @property
    def state(self) -> InitState:
        return self._state

    def register(
        self,
        module: str,
        callback: Callable[[T], Any],
        precede: Iterable[str] = (),
        *requires: str,
    ) -> None:
        """
        Register a module.

        Args:
            module: Module name
            callback: Called once with the shared context
            precede: Modules that must run after this one
            *requires: Modules that must run before this one
        """
        if self._state != InitState.PENDING:
            logger.warning(
                "Registering module after init() ran; it will not be executed",
                module=module,
                state=self._state.value,
            )
        self.graph.register(module, callback, precede, *requires)

    def plan(self) -> list[str]:
        """
        Return the order in which init() would run the modules.

        Raises:
            PlanningError: If a requirement is unknown or modules form a cycle
        """
        return self.planner.plan()

    def analyze(self) -> InitPlan:
        """Return the full planning result (order, depths, closures)."""
        return self.planner.analyze()

    def init(self) -> tuple[str, ...]:
        """
        Invoke every callback in plan order with the shared context.

        Returns:
            Names of the executed modules, in order

        Raises:
            AlreadyInitializedError: If init() already ran (or is running)
            PlanningError: If no valid order exists; no callback is invoked
        """
        if self._state != InitState.PENDING:
            raise AlreadyInitializedError()

        order = self.plan()

        self._state = InitState.RUNNING
        executed: list[str] = []

        for module in order:
            logger.debug("Initializing module", module=module, position=len(executed))
            try:
                self.graph.callback(module)(self._context)
            except Exception:
                self._state = InitState.FAILED
                logger.error("Module initialization failed", module=module, exc_info=True)
                raise
            executed.append(module)

        self._state = InitState.DONE
        logger.info("Initialization complete", modules=len(executed))

        return tuple(executed)
