"""Workspace scanning for yarn, npm, pnpm and lerna monorepos."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .descriptor import PackageDescriptor

logger = logging.getLogger(__name__)

MANIFEST_NAME = "package.json"
PNPM_WORKSPACE_NAME = "pnpm-workspace.yaml"
LERNA_CONFIG_NAME = "lerna.json"


def _read_json(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e


def _read_yaml(path: Path) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        try:
            return yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e


def _read_object(path: Path, data: Any) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain an object")
    return data


def read_workspace_patterns(root: Path) -> Optional[List[str]]:
    """Return the workspace glob patterns declared at ``root``.

    Sources are checked in order: the ``workspaces`` field of the root
    ``package.json`` (either a list or an object with a ``packages`` list),
    ``pnpm-workspace.yaml`` and ``lerna.json``.

    Returns
    -------
    List of patterns, or None when the root is not a workspace
    """
    manifest_path = root / MANIFEST_NAME
    if manifest_path.is_file():
        workspaces = _read_object(manifest_path, _read_json(manifest_path)).get("workspaces")
        if isinstance(workspaces, dict):
            workspaces = workspaces.get("packages")
        if workspaces:
            return list(workspaces)

    pnpm_path = root / PNPM_WORKSPACE_NAME
    if pnpm_path.is_file():
        data = _read_object(pnpm_path, _read_yaml(pnpm_path) or {})
        if data.get("packages"):
            return list(data["packages"])

    lerna_path = root / LERNA_CONFIG_NAME
    if lerna_path.is_file():
        packages = _read_object(lerna_path, _read_json(lerna_path)).get("packages")
        if packages:
            return list(packages)

    return None


def _glob_package_dirs(root: Path, pattern: str) -> List[Path]:
    pattern = pattern.rstrip("/")
    if pattern.startswith("./"):
        pattern = pattern[2:]
    matches: List[Path] = []
    for candidate in root.glob(pattern):
        if "node_modules" in candidate.relative_to(root).parts:
            continue
        if candidate.is_dir() and (candidate / MANIFEST_NAME).is_file():
            matches.append(candidate)
    return matches


def list_packages(root: Path) -> List[PackageDescriptor]:
    """Scan a monorepo root and return a descriptor for every package.

    Parameters
    ----------
    root:
        Directory holding the root ``package.json`` (or ``pnpm-workspace.yaml``)

    Returns
    -------
    Descriptors sorted by package directory. Without any workspace
    configuration the root package is returned on its own.
    """
    root = root.resolve()
    manifest_path = root / MANIFEST_NAME
    if not manifest_path.is_file() and not (root / PNPM_WORKSPACE_NAME).is_file():
        raise FileNotFoundError(f"No {MANIFEST_NAME} found in {root}")

    patterns = read_workspace_patterns(root)
    if patterns is None:
        logger.debug("No workspace configuration in %s, using the root package", root)
        return [PackageDescriptor.from_manifest(str(root), _read_json(manifest_path))]

    included: Dict[Path, None] = {}
    excluded: set[Path] = set()
    for pattern in patterns:
        if pattern.startswith("!"):
            excluded.update(_glob_package_dirs(root, pattern[1:]))
        else:
            for package_dir in _glob_package_dirs(root, pattern):
                included[package_dir] = None

    descriptors: List[PackageDescriptor] = []
    for package_dir in sorted(included):
        if package_dir in excluded:
            continue
        manifest = _read_json(package_dir / MANIFEST_NAME)
        descriptors.append(PackageDescriptor.from_manifest(str(package_dir), manifest))

    logger.info("Found %d packages in %s", len(descriptors), root)
    return descriptors
