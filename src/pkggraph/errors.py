"""Errors raised by the package graph."""

from __future__ import annotations


class PackageGraphError(Exception):
    """Base class for failures while building or walking a package graph."""


class DuplicateNameError(PackageGraphError, ValueError):
    """Two package descriptors share the same name."""

    def __init__(self, name: str, dir: str, existing_dir: str) -> None:
        super().__init__(f"Duplicate package name '{name}' at {dir} and {existing_dir}")
        self.name = name
        self.dir = dir
        self.existing_dir = existing_dir


class PackageNotFoundError(PackageGraphError, LookupError):
    """A traversal reached a name with no node in the graph."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Package '{name}' not found")
        self.name = name
