"""Test configuration and fixtures."""

from pathlib import Path
from typing import Generator

import pytest
from git import Actor, Repo


@pytest.fixture
def test_env(tmp_path: Path) -> Generator[tuple[Path, Path], None, None]:
    """Create a test environment with local and remote repositories.

    Branches (all pushed to origin):
        feature/merged, patch-1, patch-2, release: merged into main
        feature/unmerged: has a commit that main does not
        feature/current: checked out, tracks origin/feature/current

    Returns:
        Tuple of (local_repo_path, remote_repo_path)
    """
    remote_path = tmp_path / "remote"
    local_path = tmp_path / "local"
    remote_path.mkdir()
    local_path.mkdir()

    Repo.init(remote_path, bare=True, initial_branch="main")
    local_repo = Repo.init(local_path, initial_branch="main")

    author = Actor("Test User", "test@example.com")
    with local_repo.config_writer() as writer:
        writer.set_value("user", "name", author.name)
        writer.set_value("user", "email", author.email)

    readme = local_path / "README.md"
    readme.write_text("# Test Repository")
    local_repo.index.add(["README.md"])
    local_repo.index.commit("Initial commit", author=author, committer=author)
    main_branch = local_repo.heads.main

    origin = local_repo.create_remote("origin", url=str(remote_path))
    origin.push("main")
    main_branch.set_tracking_branch(origin.refs.main)

    def create_branch(name: str, merge: bool = False, commit: bool = True) -> None:
        """Create a branch off main, push it and optionally merge it back."""
        main_branch.checkout()
        branch = local_repo.create_head(name)
        branch.checkout()

        if commit:
            filename = f"{name.replace('/', '_')}.txt"
            (local_path / filename).write_text(f"{name} content")
            local_repo.index.add([filename])
            local_repo.index.commit(f"Add {name}", author=author, committer=author)

        origin.push(name)
        branch.set_tracking_branch(origin.refs[name])

        if merge:
            main_branch.checkout()
            local_repo.git.merge(name, "--no-ff", "--no-edit")
            origin.push("main")

    create_branch("feature/merged", merge=True)
    create_branch("patch-1", merge=True)
    create_branch("patch-2", merge=True)
    create_branch("release", merge=True)
    create_branch("feature/unmerged")
    create_branch("feature/current", commit=False)

    yield local_path, remote_path


@pytest.fixture
def test_repo(test_env: tuple[Path, Path]) -> Path:
    """Path of the local repository."""
    local_path, _ = test_env
    return local_path
