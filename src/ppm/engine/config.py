"""
Engine configuration.

An `EngineConfig` describes how to build an engine: its initial variables,
its root path and which predefined commands it offers. It can be created
from a dict or a YAML file with partial overrides.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ppm.engine.registry import is_valid_command_name
from ppm.exceptions import ConfigError


class EngineConfig(BaseModel):
    """Configuration for `Engine.from_config`.

    Examples:
        # All defaults: predefined commands, no variables, current directory
        config = EngineConfig()

        # From a dict, unknown keys are ignored
        config = EngineConfig.from_dict({"variables": {"name": "world"}})

        # From YAML file
        config = EngineConfig.from_yaml("ppm.yaml")
    """

    model_config = ConfigDict(extra="ignore", frozen=True)

    variables: dict[str, str] = Field(default_factory=dict)
    root_path: Path | None = None
    predefined_commands: bool = True
    disabled_commands: list[str] = Field(default_factory=list)

    @field_validator("variables", mode="before")
    @classmethod
    def _stringify_values(cls, value: Any) -> Any:
        # every value in the engine is a string; YAML gives us ints and bools
        if isinstance(value, dict):
            return {str(k): v if isinstance(v, str) else _to_str(v) for k, v in value.items()}
        return value

    @field_validator("disabled_commands")
    @classmethod
    def _check_command_names(cls, names: list[str]) -> list[str]:
        invalid = [name for name in names if not is_valid_command_name(name)]
        if invalid:
            raise ValueError(f"invalid command names: {', '.join(map(repr, invalid))}")
        return names

    @classmethod
    def from_dict(cls, config: dict[str, Any], source: str = "<dict>") -> EngineConfig:
        """Create from dict, only overriding specified values.

        Args:
            config: Dictionary with partial overrides
            source: Description of where the dict came from, for error messages

        Raises:
            ConfigError: If a value does not validate
        """
        try:
            return cls.model_validate(config)
        except ValidationError as e:
            raise ConfigError(source, str(e)) from e

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> EngineConfig:
        """Create from YAML file with partial overrides.

        Example YAML:
            root_path: templates
            variables:
              project: ppm
              year: 2024
            disabled_commands: [run]
        """
        import yaml

        path = Path(yaml_path)
        try:
            with path.open() as f:
                config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(str(path), str(e)) from e
        if not isinstance(config, dict):
            raise ConfigError(str(path), "top level must be a mapping")
        return cls.from_dict(config, source=str(path))


def _to_str(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return ""
    return str(value)
