# Copyright 2026 StyleBatch Contributors
# SPDX-License-Identifier: Apache-2.0

"""Project configuration and file discovery for StyleBatch."""

from stylebatch.workspace.config import (
    CONFIG_FILE_NAME,
    LEGACY_CONFIG_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    find_workspace_config,
    load_workspace_config,
)
from stylebatch.workspace.scan import TARGET_DIRECTORIES, collect_source_files

__all__ = [
    "CONFIG_FILE_NAME",
    "LEGACY_CONFIG_FILE_NAME",
    "TARGET_DIRECTORIES",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "collect_source_files",
    "find_workspace_config",
    "load_workspace_config",
]
