"""
Shared pytest fixtures for githours tests.
"""

import subprocess
import tempfile
from pathlib import Path

import git
import pandas as pd
import pytest
from git import Actor

__author__ = "willmcginnis"


def get_default_branch():
    """Get the branch name git gives new repositories on this machine."""
    try:
        result = subprocess.run(
            ["git", "config", "--global", "init.defaultBranch"],
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode == 0 and result.stdout.strip():
            return result.stdout.strip()
    except OSError:
        pass

    # Otherwise ask git what it creates in a scratch repository
    try:
        with tempfile.TemporaryDirectory() as temp_dir:
            repo = git.Repo.init(temp_dir)
            name = repo.git.symbolic_ref("--short", "HEAD")
            if name:
                return name
    except (OSError, git.GitCommandError):
        pass

    return "master"


@pytest.fixture(scope="session")
def default_branch():
    """Pytest fixture to get the default branch name."""
    return get_default_branch()


def at(timestamp):
    """A UTC pandas Timestamp from an ISO string, e.g. ``at("2024-01-01 09:00")``."""
    return pd.Timestamp(timestamp, tz="UTC")


@pytest.fixture
def make_repo(tmp_path, default_branch):
    """Factory for empty git repositories checked out on the default branch."""

    def _make(name="repository1"):
        repo_path = tmp_path / name
        repo_path.mkdir()
        repo = git.Repo.init(repo_path)

        repo.config_writer().set_value("user", "name", "Test User").release()
        repo.config_writer().set_value("user", "email", "test@example.com").release()
        repo.git.checkout("-b", default_branch)
        return repo

    return _make


@pytest.fixture
def commit_at():
    """Factory committing a change with a fixed author and committer date.

    Usage: ``commit_at(repo, "message", "2024-01-01 09:00", name="Alice", email="alice@example.com")``
    """

    def _commit(repo, message, when, name="Alice", email="alice@example.com", parents=None):
        work_file = Path(repo.working_tree_dir) / "work.txt"
        with open(work_file, "a") as f:
            f.write(f"{message}\n")
        repo.index.add(["work.txt"])

        actor = Actor(name, email)
        date = f"{int(at(when).timestamp())} +0000"
        return repo.index.commit(
            message,
            parent_commits=parents,
            author=actor,
            committer=actor,
            author_date=date,
            commit_date=date,
        )

    return _commit


@pytest.fixture
def alice_and_bob_repo(make_repo, commit_at):
    """alice commits at 09:00, 09:20 and 11:30, bob at 10:00, all on 2024-01-01 UTC."""
    repo = make_repo()
    commit_at(repo, "Initial commit", "2024-01-01 09:00")
    commit_at(repo, "Add parser", "2024-01-01 09:20")
    commit_at(repo, "Fix typo", "2024-01-01 10:00", name="Bob", email="bob@example.com")
    commit_at(repo, "Add tests", "2024-01-01 11:30")
    return Path(repo.working_tree_dir)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')")
