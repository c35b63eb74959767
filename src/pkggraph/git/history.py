"""Changed-file listing on top of GitPython."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

logger = logging.getLogger(__name__)


class GitRepo:
    """Wrapper around gitpython for comparing the working tree to a reference."""

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path.resolve()
        try:
            self.repo = Repo(self.repo_path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise ValueError(f"Not a valid git repository: {repo_path}") from e

    @property
    def root(self) -> Path:
        """Top level of the working tree; changed paths are relative to it."""
        return Path(self.repo.working_tree_dir)

    def merge_base(self, ref: str) -> str:
        """Return the SHA of the best common ancestor of ``HEAD`` and ``ref``."""
        try:
            bases = self.repo.merge_base("HEAD", ref)
        except GitCommandError as e:
            raise ValueError(f"Unknown git reference '{ref}'") from e
        if not bases:
            raise ValueError(f"No common ancestor between HEAD and '{ref}'")
        return bases[0].hexsha

    def list_changed_files(self, ref: str, include_untracked: bool = True) -> List[str]:
        """List files that differ from the merge base of ``HEAD`` and ``ref``.

        Parameters
        ----------
        ref:
            Branch, tag or commit to compare against
        include_untracked:
            Also report untracked files that are not ignored

        Returns
        -------
        Sorted repository-relative paths using ``/`` separators
        """
        base = self.merge_base(ref)
        logger.debug("Comparing working tree against merge base %s of '%s'", base[:8], ref)

        # NUL-separated output keeps non-ASCII paths unquoted
        output = self.repo.git.diff("--name-only", "-z", base)
        changed = {path for path in output.split("\0") if path}
        if include_untracked:
            changed.update(self.repo.untracked_files)

        logger.debug("Found %d changed files since '%s'", len(changed), ref)
        return sorted(changed)


def list_changed_files(root: Path, ref: str, include_untracked: bool = True) -> List[str]:
    """Shortcut for ``GitRepo(root).list_changed_files(ref)``."""
    return GitRepo(root).list_changed_files(ref, include_untracked=include_untracked)
