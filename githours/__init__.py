from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("git-hours-py")
except PackageNotFoundError:
    # running from a source checkout that was never installed
    __version__ = "unknown"

from githours.commits import Author, BranchReference, CommitRecord  # noqa: E402
from githours.config import ALWAYS, RunConfig  # noqa: E402
from githours.estimator import estimate_hours  # noqa: E402
from githours.exceptions import (  # noqa: E402
    ConfigError,
    GitHoursError,
    InvalidRepositoryError,
    RepositoryError,
    ShallowRepositoryError,
    TraversalError,
)
from githours.report import AuthorWork, HoursReport  # noqa: E402
from githours.repository import Repository  # noqa: E402

__author__ = "willmcginnis"

__all__ = [
    "ALWAYS",
    "Author",
    "AuthorWork",
    "BranchReference",
    "CommitRecord",
    "ConfigError",
    "GitHoursError",
    "HoursReport",
    "InvalidRepositoryError",
    "Repository",
    "RepositoryError",
    "RunConfig",
    "ShallowRepositoryError",
    "TraversalError",
    "estimate_hours",
]
