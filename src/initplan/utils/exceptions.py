"""Custom exceptions for the initialization planner.

Exception Hierarchy:
-------------------
InitPlanError (base)
├── PlanningError
│   ├── UnknownDependencyError   # A requirement was never registered with a callback
│   └── DependencyCycleError     # Two modules transitively require each other
├── DuplicateModuleError         # Re-registration while allow_reregister is off
├── AlreadyInitializedError      # init() called more than once
└── ManifestError                # Malformed module manifest (CLI input)

Usage Guidelines:
----------------
1. Planning errors are static wiring mistakes. They are deterministic functions
   of the registration calls, so retrying is meaningless. Treat them as fatal
   and halt start-up.

2. Catch PlanningError to handle both planning failures in one place, or the
   concrete subclass to branch on the offending module names.

3. Callback failures are not wrapped. Whatever a callback raises propagates
   out of Initializer.init() unchanged.
"""


class InitPlanError(Exception):
    """Base exception for all planner errors."""

    pass


class PlanningError(InitPlanError):
    """Raised when no valid initialization order can be produced."""

    pass


class UnknownDependencyError(PlanningError):
    """
    Raised when a module requires a module that has no registered callback.

    Also raised for precede targets that were never registered themselves:
    in that case ``module`` is the module that declared the precede edge.
    """

    def __init__(self, module: str, dependency: str, precede: bool = False) -> None:
        """
        Initialize UnknownDependencyError.

        Args:
            module: Module holding the unresolved requirement.
            dependency: Module that was never registered.
            precede: True when the edge came from a precede declaration on ``module``.
        """
        relation = "must precede" if precede else "requires"
        super().__init__(
            f"Module '{module}' {relation} module '{dependency}' "
            f"but module '{dependency}' was never registered"
        )
        self.module = module
        self.dependency = dependency
        self.precede = precede


class DependencyCycleError(PlanningError):
    """
    Raised when modules transitively depend on each other.

    Example cycles:
    1. database requires config, config requires database
    2. a requires b, b requires c, c requires a
    3. a requires a

    The order of the two names is not significant.
    """

    def __init__(self, module: str, other: str) -> None:
        """
        Initialize DependencyCycleError.

        Args:
            module: One module in the cycle.
            other: Another module in the same cycle (may equal ``module``).
        """
        super().__init__(f"Dependency cycle between '{module}' and '{other}'")
        self.module = module
        self.other = other

    @property
    def modules(self) -> frozenset[str]:
        """The offending pair, without ordering."""
        return frozenset((self.module, self.other))


class DuplicateModuleError(InitPlanError):
    """Raised when a module is registered twice and re-registration is disabled."""

    def __init__(self, module: str) -> None:
        super().__init__(f"Module '{module}' is already registered")
        self.module = module


class AlreadyInitializedError(InitPlanError):
    """Raised when the initializer has already been called."""

    def __init__(self, message: str = "The initializer has already been called") -> None:
        super().__init__(message)


class ManifestError(InitPlanError):
    """Raised when a module manifest cannot be loaded."""

    def __init__(self, message: str, path: str | None = None) -> None:
        """
        Initialize ManifestError.

        Args:
            message: Error message.
            path: Optional manifest path the error refers to.
        """
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        if self.path:
            return f"{self.path}: {self.args[0]}"
        return str(self.args[0]) if self.args else "Invalid manifest"
