"""Configuration management for the initialization planner."""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import yaml

_FALSE_VALUES = ("0", "false", "no", "off")


class TieBreak(str, Enum):
    """Ordering rule for modules that do not depend on each other."""

    NAME = "name"  # Lexical order of module names
    REGISTRATION = "registration"  # Order in which the graph first saw each name


@dataclass
class PolicyConfig:
    """
    Policy configuration for registration and planning.

    Controls how re-registration is treated and how independent modules are ordered.
    """

    tie_break: TieBreak = TieBreak.NAME
    # Re-registering replaces the callback and appends requires edges
    allow_reregister: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.tie_break, TieBreak):
            try:
                self.tie_break = TieBreak(str(self.tie_break).lower())
            except ValueError as e:
                raise ValueError(
                    f"Invalid tie_break '{self.tie_break}', "
                    f"expected one of: {', '.join(t.value for t in TieBreak)}"
                ) from e
        if isinstance(self.allow_reregister, str):
            self.allow_reregister = self.allow_reregister.strip().lower() not in _FALSE_VALUES


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    format: str = "console"
    file: Path | None = None

    @property
    def json_logs(self) -> bool:
        return self.format.lower() == "json"


@dataclass
class PlannerConfig:
    """
    Complete configuration for the planner.

    This combines all configuration sections.
    """

    policy: PolicyConfig = field(default_factory=PolicyConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, config_path: Path) -> "PlannerConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to YAML config file

        Returns:
            PlannerConfig instance

        Raises:
            ValueError: If the file is not valid YAML, not a mapping, or has unknown keys
        """
        try:
            with open(config_path) as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}") from e

        # An empty file means "all defaults"
        if data is None:
            data = {}

        if not isinstance(data, dict):
            raise ValueError(
                f"Invalid configuration file structure in {config_path}: "
                f"expected dictionary, got {type(data).__name__}"
            )

        logging_data = dict(data.get("logging") or {})
        if logging_data.get("file"):
            logging_data["file"] = Path(logging_data["file"])

        try:
            policy = PolicyConfig(**(data.get("policy") or {}))
            logging = LoggingConfig(**logging_data)
        except TypeError as e:
            raise ValueError(f"Invalid configuration in {config_path}: {e}") from e

        return cls(policy=policy, logging=logging)

    def to_file(self, config_path: Path) -> None:
        """
        Save configuration to YAML file.

        Args:
            config_path: Path to save config file
        """
        data = {
            "policy": {
                k: v.value if isinstance(v, Enum) else v for k, v in self.policy.__dict__.items()
            },
            "logging": {
                k: str(v) if isinstance(v, Path) else v
                for k, v in self.logging.__dict__.items()
                if v is not None
            },
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    @classmethod
    def from_env(cls) -> "PlannerConfig":
        """
        Create configuration from environment variables.

        Environment variables:
            INITPLAN_TIE_BREAK: "name" or "registration" (default: name)
            INITPLAN_ALLOW_REREGISTER: "true"/"false" (default: true)
            INITPLAN_LOG_LEVEL: Logging level (default: INFO)
            INITPLAN_LOG_FORMAT: "console" or "json" (default: console)
            INITPLAN_LOG_FILE: Optional log file path

        Returns:
            PlannerConfig instance
        """
        policy = PolicyConfig(
            tie_break=os.getenv("INITPLAN_TIE_BREAK", TieBreak.NAME.value),
            allow_reregister=os.getenv("INITPLAN_ALLOW_REREGISTER", "true"),
        )

        log_file = os.getenv("INITPLAN_LOG_FILE")
        logging = LoggingConfig(
            level=os.getenv("INITPLAN_LOG_LEVEL", "INFO"),
            format=os.getenv("INITPLAN_LOG_FORMAT", "console"),
            file=Path(log_file) if log_file else None,
        )

        return cls(policy=policy, logging=logging)
