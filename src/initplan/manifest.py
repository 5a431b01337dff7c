"""Module manifest - YAML declaration of modules for planning from the command line.

Format:
------
    modules:
      - name: config
      - name: database
        requires: [config]
      - name: metrics
        precede: [http]
      - name: http
        requires: [database]

``requires`` and ``precede`` accept a list or a single name. Unknown keys are
rejected. Manifest modules get a no-op callback: the manifest describes the
ordering only.
"""

from pathlib import Path
from typing import Annotated, Any

import structlog
import yaml
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, ValidationError, field_validator

from .config import PlannerConfig
from .execution.initializer import Initializer
from .utils.exceptions import ManifestError

logger = structlog.get_logger(__name__)


def strip_whitespace(v: Any) -> Any:
    if isinstance(v, str):
        return v.strip()
    return v


def as_name_list(v: Any) -> Any:
    """Accept a single name, a list of names, or nothing."""
    if v is None:
        return []
    if isinstance(v, str):
        return [v]
    return v


ModuleName = Annotated[str, BeforeValidator(strip_whitespace), Field(min_length=1)]
ModuleNames = Annotated[list[ModuleName], BeforeValidator(as_name_list)]


class ModuleDeclaration(BaseModel):
    """One module entry of a manifest."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: ModuleName
    requires: ModuleNames = Field(default_factory=list)
    precede: ModuleNames = Field(default_factory=list)
    description: str | None = None


class Manifest(BaseModel):
    """Top-level manifest document."""

    model_config = ConfigDict(extra="forbid")

    modules: list[ModuleDeclaration] = Field(default_factory=list)

    @field_validator("modules", mode="before")
    @classmethod
    def _none_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


def load_manifest(path: Path) -> list[ModuleDeclaration]:
    """
    Load and validate a manifest file.

    Args:
        path: Path to the YAML manifest

    Returns:
        Module declarations in file order

    Raises:
        ManifestError: If the file is unreadable, not YAML, or does not match the format
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ManifestError(f"Cannot read manifest: {e}", path=str(path)) from e
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML: {e}", path=str(path)) from e

    if not isinstance(data, dict):
        raise ManifestError(
            f"Expected a mapping with a 'modules' key, got {type(data).__name__}",
            path=str(path),
        )

    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ManifestError(f"Invalid manifest: {errors}", path=str(path)) from e

    logger.debug("Loaded manifest", path=str(path), modules=len(manifest.modules))

    return manifest.modules


def _noop(context: Any) -> None:
    return None


def build_initializer(
    declarations: list[ModuleDeclaration],
    config: PlannerConfig | None = None,
) -> Initializer[Any]:
    """
    Register manifest declarations on a fresh Initializer.

    Args:
        declarations: Modules to register, in order
        config: Planner configuration

    Returns:
        Initializer with one no-op callback per declared module
    """
    initializer: Initializer[Any] = Initializer(config=config)
    for decl in declarations:
        initializer.register(decl.name, _noop, decl.precede, *decl.requires)
    return initializer
