"""Package manifests and workspace discovery."""

from .descriptor import PackageDescriptor
from .discovery import list_packages, read_workspace_patterns

__all__ = [
    "PackageDescriptor",
    "list_packages",
    "read_workspace_patterns",
]
