"""Centralized path management for the kassenbon project.

This module provides a single source of truth for all project paths,
eliminating scattered path definitions across modules.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from kassenbon.domain.tables import PRICE_LOG_FILE, PURCHASES_FILE, STORES_FILE


def _get_project_root() -> Path:
    """Determine the project root directory.

    ``KASSENBON_HOME`` wins; otherwise the checkout containing the package.
    """
    env_root = os.environ.get("KASSENBON_HOME")
    if env_root:
        return Path(env_root).expanduser()
    # kassenbon/runtime/paths.py -> kassenbon/runtime -> kassenbon -> project root
    return Path(__file__).parent.parent.parent


@dataclass
class ProjectPaths:
    """Container for all project-related paths.

    All paths are computed relative to the project root, ensuring consistency
    across all modules regardless of the current working directory.
    """

    root: Path = field(default_factory=_get_project_root)

    def __post_init__(self) -> None:
        # Ensure root is resolved to absolute path
        self.root = self.root.resolve()

    # --- Configuration paths ---
    @property
    def config(self) -> Path:
        """Configuration directory (config/)."""
        return self.root / "config"

    @property
    def mail_sources(self) -> Path:
        """Receipt sender / store name TOML file."""
        return self.config / "mail_sources.toml"

    # --- Table paths ---
    @property
    def data(self) -> Path:
        """Directory holding the CSV tables."""
        return self.root / "data"

    @property
    def stores_table(self) -> Path:
        return self.data / STORES_FILE

    @property
    def purchases_table(self) -> Path:
        return self.data / PURCHASES_FILE

    @property
    def price_log_table(self) -> Path:
        return self.data / PRICE_LOG_FILE

    # --- Mail paths ---
    @property
    def maildir(self) -> Path:
        """Maildir that receipt emails are delivered to."""
        return self.root / "mail" / "kassenbons"

    def ensure_data_directory(self) -> None:
        """Create the table directory if it doesn't exist."""
        self.data.mkdir(parents=True, exist_ok=True)


# Module-level singleton
_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance.

    Returns:
        The global ProjectPaths instance.
    """
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached instance so the next get_paths() re-reads KASSENBON_HOME."""
    global _paths
    _paths = None
