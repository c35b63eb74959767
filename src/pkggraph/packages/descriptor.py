"""Descriptor of a single workspace package as read from its manifest."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping


@dataclass(slots=True)
class PackageDescriptor:
    """Name, location and declared dependencies of one package."""

    name: str
    dir: str
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    optional_dependencies: Dict[str, str] = field(default_factory=dict)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_manifest(cls, dir: str, manifest: Mapping[str, Any]) -> "PackageDescriptor":
        """Build a descriptor from a parsed ``package.json``.

        The full manifest is kept as ``metadata`` so that fields such as
        ``bundled`` or ``backstage.role`` stay available to callers.
        """
        name = manifest.get("name")
        if not name:
            raise ValueError(f"Package at {dir} has no name")
        return cls(
            name=name,
            dir=dir,
            dependencies=dict(manifest.get("dependencies") or {}),
            dev_dependencies=dict(manifest.get("devDependencies") or {}),
            optional_dependencies=dict(manifest.get("optionalDependencies") or {}),
            metadata=dict(manifest),
        )
