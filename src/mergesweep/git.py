"""Git repository operations."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from git import GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo

from mergesweep.config import Local, Remote, Scope
from mergesweep.exceptions import GitError

logger = logging.getLogger(__name__)

CONFIG_SECTION = "mergesweep"


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of deleting one branch."""

    branch: str
    deleted: bool
    message: str = ""


class GitConfigStore:
    """Persisted settings read from the ``[mergesweep]`` section of git config."""

    def __init__(self, repo: Repo) -> None:
        self.repo = repo

    def get(self, key: str) -> Optional[str]:
        """Return the configured value, or None if it is not set."""
        reader = self.repo.config_reader()
        try:
            if not reader.has_option(CONFIG_SECTION, key):
                return None
            # get_value() would coerce "1.10" to a float and "true" to a bool
            return reader.get(CONFIG_SECTION, key)
        finally:
            reader.release()


class GitRepo:
    """Git repository operations."""

    def __init__(self, path: Path) -> None:
        """Initialize repository."""
        try:
            self.repo: Repo = Repo(path, search_parent_directories=True)
            if self.repo.bare:
                raise GitError("Cannot operate on bare repository")
        except (GitCommandError, ValueError, InvalidGitRepositoryError, NoSuchPathError) as err:
            raise GitError(f"Failed to open repository: {err}") from err

    @property
    def config(self) -> GitConfigStore:
        """Persisted settings of this repository."""
        return GitConfigStore(self.repo)

    def get_current_branch_name(self) -> str:
        """Get current branch name, or an empty string on a detached HEAD."""
        try:
            return self.repo.active_branch.name
        except TypeError:
            return ""

    def get_tracking_branch(self) -> Optional[tuple[str, str]]:
        """Get the upstream of the current branch as ``(remote, branch)``."""
        try:
            tracking = self.repo.active_branch.tracking_branch()
        except TypeError:
            return None
        if tracking is None:
            return None
        return tracking.remote_name, tracking.remote_head

    def fetch(self, remote: str) -> None:
        """Fetch from a remote, pruning branches deleted there."""
        try:
            self.repo.git.fetch("--prune", remote)
        except GitCommandError as err:
            raise GitError(f"Failed to fetch from {remote}: {err}") from err

    def list_merged(self, target: str, scope: Scope) -> list[str]:
        """List branches merged into ``target`` within ``scope``.

        The current branch is never listed. Locally, a branch is dropped as the
        target only when its name equals ``target`` exactly: with
        ``origin/main`` as the target, local ``main`` is still listed and is
        left to the protected branches. For a remote, the target (with or
        without the remote prefix), the remote's HEAD alias and the upstream of
        the current branch are left out, and names come back without the
        remote prefix.

        Args:
            target: Branch or ref the candidates must be merged into
            scope: Local branches or the branches of one remote

        Returns:
            Branch names in git's ref order

        Raises:
            GitError: If the target or remote does not exist, or fetching fails
        """
        if isinstance(scope, Remote):
            return self._list_merged_remote(target, scope.name)
        return self._list_merged_local(target)

    def _merged_refs(self, target: str, *args: str) -> list[str]:
        try:
            output = self.repo.git.branch(*args, "--merged", target, "--format=%(refname)")
        except GitCommandError as err:
            raise GitError(f"Failed to list branches merged into {target}: {err}") from err
        return [line.strip() for line in output.splitlines() if line.strip()]

    def _list_merged_local(self, target: str) -> list[str]:
        current = self.get_current_branch_name()
        prefix = "refs/heads/"
        branches = []
        for ref in self._merged_refs(target):
            if not ref.startswith(prefix):
                continue
            name = ref[len(prefix) :]
            if name in (current, target):
                continue
            branches.append(name)
        return branches

    def _list_merged_remote(self, target: str, remote: str) -> list[str]:
        if remote not in [r.name for r in self.repo.remotes]:
            raise GitError(f"No such remote: {remote}")
        self.fetch(remote)

        excluded = {"HEAD", target}
        if target.startswith(f"{remote}/"):
            excluded.add(target[len(remote) + 1 :])
        tracking = self.get_tracking_branch()
        if tracking and tracking[0] == remote:
            excluded.add(tracking[1])

        prefix = f"refs/remotes/{remote}/"
        branches = []
        for ref in self._merged_refs(target, "-r"):
            if not ref.startswith(prefix):
                continue
            name = ref[len(prefix) :]
            if name in excluded:
                continue
            branches.append(name)
        return branches

    def delete_branch(self, scope: Scope, branch: str) -> DeletionResult:
        """Delete a single branch, locally or on the scope's remote.

        Local branches are deleted with ``git branch -d``, so git itself
        refuses branches that are not fully merged.
        """
        try:
            if isinstance(scope, Local):
                self.repo.git.branch("-d", branch)
            else:
                self.repo.git.push(scope.name, "--delete", branch)
        except GitCommandError as err:
            message = str(err).strip()
            logger.debug("Deleting %s failed: %s", branch, message)
            return DeletionResult(branch, False, message)
        return DeletionResult(branch, True)
