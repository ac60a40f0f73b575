"""Plugin configuration for the image metadata extraction step."""

import json
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from imagemeta.exceptions import ConfigurationError

DEFAULT_COMMAND = "/usr/bin/exiftool"
DEFAULT_TIMEOUT = 60.0
WILDCARD = "*"


class FieldMapping(BaseModel):
    """One `field` entry: a line prefix and where its value goes."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    line: str = Field(description="Prefix of the tool output line to match")
    metadata_field: Optional[str] = Field(default=None, alias="metadata")
    property_name: Optional[str] = Field(default=None, alias="property")

    @field_validator("line", mode="before")
    @classmethod
    def validate_line(cls, v):
        if v is None or not str(v).strip():
            raise ValueError("field entries need a non-blank 'line' attribute")
        return str(v)

    @field_validator("metadata_field", "property_name", mode="before")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        v = str(v).strip()
        return v or None


class StepConfiguration(BaseModel):
    """Immutable configuration of one step invocation."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    command: str = Field(default=DEFAULT_COMMAND, description="Metadata tool to call on the first image")
    property_container: int = Field(default=0, alias="propertyContainer")
    timeout: Optional[float] = Field(default=DEFAULT_TIMEOUT, gt=0, description="Seconds to wait for the tool, None waits forever")
    fields: tuple[FieldMapping, ...] = Field(default=(), alias="field")

    @field_validator("command", mode="before")
    @classmethod
    def validate_command(cls, v):
        if v is None or not str(v).strip():
            return DEFAULT_COMMAND
        return str(v).strip()

    @field_validator("fields", mode="before")
    @classmethod
    def validate_fields(cls, v):
        # a single field entry may be given without a list
        if v is None:
            return ()
        if isinstance(v, dict):
            return (v,)
        return v

    @property
    def line_to_metadata_field(self) -> dict[str, str]:
        """Ordered mapping of line prefix to metadata type name."""
        return {f.line: f.metadata_field for f in self.fields if f.metadata_field}

    @property
    def line_to_property_name(self) -> dict[str, str]:
        """Ordered mapping of line prefix to process property title."""
        return {f.line: f.property_name for f in self.fields if f.property_name}

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "StepConfiguration":
        """Create config from dictionary."""
        try:
            return cls.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid step configuration: {e}") from e

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "StepConfiguration":
        """Load a single step configuration from a JSON/YAML file."""
        return cls.from_dict(_read_config_file(config_path))


class ScopedStepConfiguration(StepConfiguration):
    """A `config` block of the plugin file, restricted to projects and steps."""

    project: tuple[str, ...] = (WILDCARD,)
    step: tuple[str, ...] = (WILDCARD,)

    @field_validator("project", "step", mode="before")
    @classmethod
    def validate_scope(cls, v):
        if v is None:
            return (WILDCARD,)
        if isinstance(v, str):
            return (v,)
        return v


class PluginConfigFile(BaseModel):
    """Content of a plugin configuration file holding several `config` blocks."""

    configs: list[ScopedStepConfiguration] = Field(default_factory=list, alias="config")

    @field_validator("configs", mode="before")
    @classmethod
    def validate_configs(cls, v):
        if isinstance(v, dict):
            return [v]
        return v

    def select(self, project: str = WILDCARD, step: str = WILDCARD) -> ScopedStepConfiguration:
        """Pick the block for a project and step.

        Exact project and step win over a project-only match, which wins over a
        step-only match, which wins over the catch-all block.
        """
        candidates = [
            (project, step),
            (project, WILDCARD),
            (WILDCARD, step),
            (WILDCARD, WILDCARD),
        ]
        for wanted_project, wanted_step in candidates:
            for block in self.configs:
                if wanted_project in block.project and wanted_step in block.step:
                    return block
        raise ConfigurationError(f"No configuration block found for project {project!r} and step {step!r}")


def _read_config_file(config_path: Union[str, Path]) -> dict[str, Any]:
    config_path = Path(config_path)
    try:
        with open(config_path, encoding="utf-8") as f:
            if config_path.suffix.lower() == ".json":
                raw = json.load(f)
            elif config_path.suffix.lower() in [".yaml", ".yml"]:
                raw = yaml.safe_load(f)
            else:
                raise ConfigurationError(f"Unsupported config file format: {config_path.suffix}")
    except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read configuration file {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Configuration file {config_path} must contain a mapping")
    return raw


def load_step_config(
    path: Union[str, Path], project: str = WILDCARD, step: str = WILDCARD
) -> StepConfiguration:
    """Load the step configuration that applies to a project and step.

    The file either holds a list of `config` blocks (optionally below a
    `config_plugin` key) or a single unscoped configuration.
    """
    raw = _read_config_file(path)
    raw = raw.get("config_plugin", raw)

    if "config" not in raw:
        return StepConfiguration.from_dict(raw)

    try:
        plugin_config = PluginConfigFile.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid plugin configuration in {path}: {e}") from e
    return plugin_config.select(project, step)
