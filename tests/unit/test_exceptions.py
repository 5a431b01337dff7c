"""Unit tests for Custom Exceptions."""

import pytest

from initplan.utils.exceptions import (
    AlreadyInitializedError,
    DependencyCycleError,
    DuplicateModuleError,
    InitPlanError,
    ManifestError,
    PlanningError,
    UnknownDependencyError,
)


class TestUnknownDependencyError:
    """Test UnknownDependencyError exception."""

    def test_creation(self):
        """Test creating UnknownDependencyError."""
        error = UnknownDependencyError("http", "database")

        assert str(error) == (
            "Module 'http' requires module 'database' but module 'database' was never registered"
        )
        assert error.module == "http"
        assert error.dependency == "database"
        assert error.precede is False

    def test_precede_message(self):
        """Test message for a precede target that was never registered."""
        error = UnknownDependencyError("metrics", "http", precede=True)

        assert str(error).startswith("Module 'metrics' must precede module 'http'")

    def test_inheritance(self):
        """Test UnknownDependencyError inheritance."""
        error = UnknownDependencyError("a", "b")

        assert isinstance(error, PlanningError)
        assert isinstance(error, InitPlanError)


class TestDependencyCycleError:
    """Test DependencyCycleError exception."""

    def test_creation(self):
        """Test creating DependencyCycleError."""
        error = DependencyCycleError("a", "b")

        assert str(error) == "Dependency cycle between 'a' and 'b'"
        assert error.module == "a"
        assert error.other == "b"

    def test_pair_is_unordered(self):
        """Test that the offending pair compares without order."""
        assert DependencyCycleError("a", "b").modules == DependencyCycleError("b", "a").modules

    def test_inheritance(self):
        """Test DependencyCycleError inheritance."""
        assert isinstance(DependencyCycleError("a", "b"), PlanningError)


class TestOtherErrors:
    """Test remaining exceptions."""

    def test_duplicate_module_error(self):
        """Test creating DuplicateModuleError."""
        error = DuplicateModuleError("http")

        assert str(error) == "Module 'http' is already registered"
        assert error.module == "http"
        assert not isinstance(error, PlanningError)

    def test_already_initialized_error(self):
        """Test default message of AlreadyInitializedError."""
        error = AlreadyInitializedError()

        assert str(error) == "The initializer has already been called"
        assert isinstance(error, InitPlanError)

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("modules.yaml", "modules.yaml: bad format"),
            (None, "bad format"),
        ],
    )
    def test_manifest_error(self, path, expected):
        """Test ManifestError string with and without a path."""
        error = ManifestError("bad format", path=path)

        assert str(error) == expected
        assert error.path == path
