# src/bulkgraph/core/config.py
"""
Configuration schema and loading for graph computers.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction: a computer reads its
settings once, at construction, and a submission never sees a change.
"""

import os
import re
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

from bulkgraph.contracts.locations import Location

# Environment variable listing local directories of executable archives
DEFAULT_LIBS_ENV_VAR = "BULKGRAPH_LIBS"

# Directory under the storage home where archives are staged
DEFAULT_REMOTE_LIBS_DIR = "bulkgraph-libs"


class ComputerSettings(BaseModel):
    """Settings for one graph computer.

    Example YAML:
        input_location: hdfs://namenode/graphs/social
        output_location: hdfs://namenode/output/social-pagerank
        derive_memory: true
        properties:
          bsp.workers: 4
    """

    model_config = {"frozen": True}

    input_location: str = Field(description="Locator of the graph to compute over")
    output_location: str = Field(description="Locator under which intermediate and job output is written")
    derive_memory: bool = Field(
        default=False,
        description="Run an extra map-reduce job to pull vertex program memory into the result",
    )
    stage_artifacts: bool = Field(
        default=True,
        description="Copy executable archives to distributed storage before running",
    )
    libs_env_var: str = Field(
        default=DEFAULT_LIBS_ENV_VAR,
        description="Environment variable holding local archive directories (os.pathsep separated)",
    )
    remote_libs_dir: str = Field(
        default=DEFAULT_REMOTE_LIBS_DIR,
        description="Directory under the storage home directory receiving staged archives",
    )
    artifact_suffixes: tuple[str, ...] = Field(
        default=(".jar",),
        description="File name suffixes identifying executable archives",
    )
    properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Engine configuration passed through to every job spec",
    )

    @field_validator("input_location", "output_location")
    @classmethod
    def validate_location(cls, v: str) -> str:
        """Locations must parse; the storage boundary decides on the scheme."""
        try:
            Location.parse(v)
        except ValueError as e:
            raise ValueError(f"Invalid location: {e}") from e
        return v

    @field_validator("remote_libs_dir")
    @classmethod
    def validate_remote_libs_dir(cls, v: str) -> str:
        if not v or "/" in v:
            raise ValueError("remote_libs_dir must be a single path segment")
        return v

    @field_validator("artifact_suffixes")
    @classmethod
    def validate_suffixes(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("At least one artifact suffix is required")
        return v

    @property
    def input(self) -> Location:
        """Parsed input location."""
        return Location.parse(self.input_location)

    @property
    def output(self) -> Location:
        """Parsed output location."""
        return Location.parse(self.output_location)


# Regex pattern for ${VAR} or ${VAR:-default} syntax
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values.

    Unset variables without a default are left as-is.
    """

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def load_settings(config_path: Path) -> ComputerSettings:
    """Load settings from a YAML file with environment variable overrides.

    Precedence:
    1. Environment variables (BULKGRAPH_*) - highest priority
    2. Config file
    3. Defaults from the Pydantic schema - lowest priority

    Args:
        config_path: Path to YAML configuration file

    Returns:
        Validated ComputerSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config file doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="BULKGRAPH",
        settings_files=[str(config_path)],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; Pydantic fields are lowercase
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k.lower(): v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}

    return ComputerSettings(**_expand_env_vars(raw_config))
