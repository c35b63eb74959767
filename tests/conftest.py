from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from pkggraph.packages import PackageDescriptor


def make_package(
    name: str,
    dir: str | None = None,
    dependencies: Dict[str, str] | None = None,
    dev: Dict[str, str] | None = None,
    optional: Dict[str, str] | None = None,
    **metadata: Any,
) -> PackageDescriptor:
    return PackageDescriptor(
        name=name,
        dir=dir if dir is not None else f"packages/{name}",
        dependencies=dependencies or {},
        dev_dependencies=dev or {},
        optional_dependencies=optional or {},
        metadata={"name": name, **metadata},
    )


def write_manifest(directory: Path, manifest: Dict[str, Any]) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "package.json"
    path.write_text(json.dumps(manifest), encoding="utf-8")
    return path


@pytest.fixture
def monorepo(tmp_path: Path) -> Path:
    """A yarn workspace with three packages under packages/ and plugins/."""
    root = tmp_path / "repo"
    write_manifest(root, {"name": "root", "private": True, "workspaces": ["packages/*", "plugins/*"]})
    write_manifest(
        root / "packages" / "core",
        {"name": "@acme/core", "version": "1.0.0", "backstage": {"role": "common-library"}},
    )
    write_manifest(
        root / "packages" / "app",
        {
            "name": "@acme/app",
            "dependencies": {"@acme/core": "^1.0.0", "react": "^18.0.0"},
            "devDependencies": {"@acme/test-utils": "*"},
        },
    )
    write_manifest(
        root / "plugins" / "test-utils",
        {"name": "@acme/test-utils", "dependencies": {"@acme/core": "^1.0.0"}},
    )
    return root
