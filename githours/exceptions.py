"""
.. module:: exceptions
   :platform: Unix, Windows
   :synopsis: Errors raised while estimating hours from a repository

Every error here is fatal to a run: nothing is retried and no partial report is produced.
"""

__author__ = "willmcginnis"


class GitHoursError(Exception):
    """Base exception for githours errors."""

    exit_code = 1


class ConfigError(GitHoursError):
    """Raised for a missing branch, an unparseable date or alias, or an invalid setting."""

    exit_code = 2


class RepositoryError(GitHoursError):
    """Base exception for repositories that cannot be analyzed."""

    exit_code = 3


class InvalidRepositoryError(RepositoryError):
    """Raised when a path does not exist or is not a git repository."""

    pass


class ShallowRepositoryError(RepositoryError):
    """Raised when a repository is a shallow clone and lacks full history."""

    exit_code = 1

    def __init__(self, path):
        self.path = path
        super().__init__(
            f"Cannot analyze shallow copies! Repository at {path} is shallow; "
            "please run git fetch --unshallow before continuing."
        )


class TraversalError(GitHoursError):
    """Raised when walking a branch's history fails."""

    exit_code = 4

    def __init__(self, branch, reason):
        self.branch = branch
        super().__init__(f"Failed to walk history of branch '{branch}': {reason}")
