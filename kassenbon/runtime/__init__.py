"""Runtime infrastructure for the kassenbon project.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Mail source configuration via load_mail_sources()

Usage:
    from kassenbon.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.root, paths.data)
"""

from kassenbon.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from kassenbon.runtime.mail_rules import MailSources, load_mail_sources
from kassenbon.runtime.paths import (
    ProjectPaths,
    get_paths,
    reset_paths,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Mail sources
    "MailSources",
    "load_mail_sources",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
