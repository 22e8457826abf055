# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the StyleBatch project configuration file.

The configuration lives in ``.stylebatch.yaml`` at the project root.  When it
is absent, an ``scss-config.json`` file is read instead; JSON is a subset of
YAML, so both go through the same loader.  Its camel-case ``includePaths`` key
is accepted as an alias of ``include-paths``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import yaml

from stylebatch.model.entities import CompileOptions
from stylebatch.model.types import OutputMode

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".stylebatch.yaml"
LEGACY_CONFIG_FILE_NAME = "scss-config.json"


class WorkspaceConfigError(Exception):
    """Raised when a configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration of a StyleBatch project.

    Attributes:
        include_paths: Directories searched after the importer's directory.
        output_mode: ``compact`` or ``expanded`` CSS.
        source_maps: Whether to produce source maps.
        cache_directory: Relative path of the persisted compile cache.
        output_directory: Relative path compiled stylesheets are written to.
        workers: Size of the compile worker pool; None for the default.
        import_only: Glob patterns of files that are never compiled standalone.
    """

    include_paths: list[str] = field(default_factory=list)
    output_mode: OutputMode = OutputMode.EXPANDED
    source_maps: bool = False
    cache_directory: str = ".stylebatch-cache"
    output_directory: str = ".stylebatch-out"
    workers: int | None = None
    import_only: list[str] = field(default_factory=list)

    def compile_options(self) -> CompileOptions:
        """Return the compile options described by this configuration."""
        return CompileOptions(
            include_paths=tuple(self.include_paths),
            output_mode=self.output_mode,
            source_maps=self.source_maps,
        )


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a StyleBatch configuration file.

    Args:
        path: Path to a ``.stylebatch.yaml`` or ``scss-config.json`` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read config file: {exc}") from exc

    return _parse_workspace_config(text, source_label=str(path))


def find_workspace_config(directory: Path) -> WorkspaceConfig:
    """Load the configuration of the project at *directory*.

    Falls back to the legacy file and then to defaults.

    Raises:
        WorkspaceConfigError: If a configuration file exists but is invalid.
    """
    for name in (CONFIG_FILE_NAME, LEGACY_CONFIG_FILE_NAME):
        candidate = directory / name
        if candidate.exists():
            return load_workspace_config(candidate)
    return WorkspaceConfig()


# ################
# Implementation
# ################

_INCLUDE_PATH_KEYS = ("include-paths", "includePaths")


def _parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse configuration YAML (or JSON) text into a WorkspaceConfig.

    Raises:
        WorkspaceConfigError: If the text is invalid or a field has the wrong type.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        return WorkspaceConfig()
    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: configuration must be a mapping")

    config = WorkspaceConfig()

    include_keys = [k for k in _INCLUDE_PATH_KEYS if k in data]
    if len(include_keys) > 1:
        raise WorkspaceConfigError(f"{source_label}: specify either 'include-paths' or 'includePaths', not both")
    if include_keys:
        config.include_paths = _string_list(data, include_keys[0], source_label)

    if "output-mode" in data:
        raw_mode = _optional_string(data, "output-mode", source_label)
        try:
            config.output_mode = OutputMode(raw_mode)
        except ValueError:
            allowed = ", ".join(m.value for m in OutputMode)
            raise WorkspaceConfigError(
                f"{source_label}: 'output-mode' must be one of {allowed}, got '{raw_mode}'"
            ) from None

    if "source-maps" in data:
        value = data["source-maps"]
        if not isinstance(value, bool):
            raise WorkspaceConfigError(f"{source_label}: 'source-maps' must be a boolean")
        config.source_maps = value

    if "cache-directory" in data:
        config.cache_directory = _optional_string(data, "cache-directory", source_label)
    if "output-directory" in data:
        config.output_directory = _optional_string(data, "output-directory", source_label)

    if "workers" in data:
        workers = data["workers"]
        if isinstance(workers, bool) or not isinstance(workers, int) or workers < 1:
            raise WorkspaceConfigError(f"{source_label}: 'workers' must be a positive integer")
        config.workers = workers

    if "import-only" in data:
        config.import_only = _string_list(data, "import-only", source_label)

    return config


def _optional_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a string field that is known to be present."""
    value = mapping[key]
    if not isinstance(value, str):
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _string_list(mapping: dict[str, object], key: str, source_label: str) -> list[str]:
    """Extract a list-of-strings field that is known to be present."""
    value = mapping[key]
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a list of strings")
    return list(value)
