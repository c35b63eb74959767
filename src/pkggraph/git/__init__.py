"""Git integration for listing files changed since a reference."""

from .history import GitRepo, list_changed_files

__all__ = [
    "GitRepo",
    "list_changed_files",
]
