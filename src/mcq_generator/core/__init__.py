"""Shared plumbing: config files, workspace, logging and credentials."""

from __future__ import annotations

from .config import TomlConfigError, read_config_table, write_private_text
from .credentials import API_KEY_ENV, load_api_key
from .logging import JsonLogFormatter, configure_logger
from .workspace import (
    WORKSPACE_ENV,
    WorkspaceError,
    WorkspaceLayout,
    ensure_workspace,
)

__all__ = [
    "TomlConfigError",
    "read_config_table",
    "write_private_text",
    "API_KEY_ENV",
    "load_api_key",
    "JsonLogFormatter",
    "configure_logger",
    "WORKSPACE_ENV",
    "WorkspaceError",
    "WorkspaceLayout",
    "ensure_workspace",
]
