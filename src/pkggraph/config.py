"""Configuration utilities for running pkggraph against a monorepo checkout."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".pkggraph.json"


@dataclass(slots=True)
class GraphConfig:
    """Runtime configuration for graph commands.

    Attributes
    ----------
    root:
        Monorepo root holding the workspace ``package.json``. Defaults to the
        current working directory.
    default_ref:
        Git reference that change detection compares against when no
        explicit reference is given on the command line.
    include_untracked:
        Whether untracked (but not ignored) files count as changed.
    """

    root: Path = field(default_factory=Path.cwd)
    default_ref: str = "origin/master"
    include_untracked: bool = True

    def resolved_root(self) -> Path:
        """Return the absolute monorepo root."""
        return self.root.resolve()

    @classmethod
    def load(cls, path: Path) -> "GraphConfig":
        """Load configuration from a JSON file.

        Parameters
        ----------
        path:
            JSON file holding an object with any of ``root``,
            ``default_ref`` and ``include_untracked``. A relative ``root`` is
            resolved against the directory of the file.

        Returns
        -------
        GraphConfig populated from the file, defaults for missing keys
        """
        with open(path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a JSON object")

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown config keys in {path}: {', '.join(unknown)}")

        kwargs: Dict[str, Any] = dict(data)
        if "root" in kwargs:
            kwargs["root"] = (path.parent / kwargs["root"]).resolve()
        else:
            kwargs["root"] = path.parent.resolve()

        logger.debug("Loaded config from %s", path)
        return cls(**kwargs)

    @classmethod
    def discover(cls, root: Path) -> "GraphConfig":
        """Load ``.pkggraph.json`` from ``root`` if present, else use defaults."""
        config_path = root / CONFIG_FILENAME
        if config_path.is_file():
            return cls.load(config_path)
        return cls(root=root)


DEFAULT_CONFIG = GraphConfig()
