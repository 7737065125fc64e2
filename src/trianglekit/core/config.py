"""
Configuration management for trianglekit.

Handles loading and validation of the engine settings: which executable to
run, the default switch strings for each input dialect, the subprocess
timeout, and the scratch workspace behaviour.
"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from trianglekit.core.exceptions import ConfigurationError

#: Default switches when triangulating a bare point cloud (``.node`` input).
POINT_CLOUD_FLAGS = "-cqY"
#: Default switches for a constrained topology (``.poly`` input).
TOPOLOGY_FLAGS = "-pqa0.2AYs"

EXECUTABLE_ENV = "TRIANGLE_PATH"
DEBUG_ENV = "TRIANGLEKIT_DEBUG"

_TRUTHY = {"1", "true", "yes", "on"}


class TriangleSettings(BaseModel):
    """Settings for one or more triangle engine invocations."""

    executable: str | None = None
    basename: str = "mesh"
    point_cloud_flags: str = POINT_CLOUD_FLAGS
    topology_flags: str = TOPOLOGY_FLAGS
    timeout: float | None = Field(default=300.0, gt=0)
    debug: bool = False
    workspace_prefix: str = "triangle"
    workspace_root: str | None = None

    @field_validator("basename")
    @classmethod
    def _plain_basename(cls, value: str) -> str:
        if not value or os.sep in value or (os.altsep and os.altsep in value):
            raise ValueError("basename must be a plain file stem")
        return value

    def default_flags(self, point_cloud: bool) -> str:
        """Return the default switch string for the given input dialect."""
        return self.point_cloud_flags if point_cloud else self.topology_flags


def load_settings(
    path: str | Path | None = None,
    environ: dict[str, str] | None = None,
) -> TriangleSettings:
    """
    Load settings from an optional YAML file and the environment.

    The YAML file holds a top-level ``triangle:`` mapping whose keys match
    :class:`TriangleSettings` fields. ``TRIANGLE_PATH`` overrides the
    executable and ``TRIANGLEKIT_DEBUG`` enables debug mode.

    Args:
        path: YAML settings file. If None, defaults are used.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        TriangleSettings instance

    Raises:
        ConfigurationError: If the file is missing, unreadable or invalid
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}

    if path is not None:
        config_file = Path(path)
        if not config_file.exists():
            raise ConfigurationError(f"Settings file not found: {config_file}")
        try:
            with open(config_file) as f:
                raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(
                f"Failed to parse settings file: {config_file}",
                details={"error": str(e)},
            ) from e
        if raw:
            section = (raw.get("triangle") or {}) if isinstance(raw, dict) else None
            if not isinstance(section, dict):
                raise ConfigurationError(
                    f"Settings file must hold a 'triangle' mapping: {config_file}"
                )
            data.update(section)

    if env.get(EXECUTABLE_ENV):
        data["executable"] = env[EXECUTABLE_ENV]
    if env.get(DEBUG_ENV, "").strip().lower() in _TRUTHY:
        data["debug"] = True

    try:
        return TriangleSettings(**data)
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid triangle settings",
            details={"error": str(e)},
        ) from e
