"""
.. module:: commits
   :platform: Unix, Windows
   :synopsis: Commit records, merging of per-branch histories and grouping by author

"""

import itertools
from dataclasses import dataclass
from datetime import datetime

import pandas as pd
from pandas import DataFrame

from githours.config import ALWAYS
from githours.logging import logger

__author__ = "willmcginnis"

COMMIT_COLUMNS = ["commit_sha", "date", "message", "author_name", "author_email"]

MERGE_PREFIX = "Merge "


@dataclass(frozen=True)
class Author:
    name: str | None
    email: str | None


@dataclass(frozen=True)
class CommitRecord:
    """One commit as seen while walking a branch.

    Attributes:
        commit_sha (str): Hex sha of the commit, unique within a repository
        timestamp (datetime): Timezone aware committer date
        message (str): Full commit message
        author (Optional[Author]): None when the commit carries neither author name nor email
    """

    commit_sha: str
    timestamp: datetime
    message: str
    author: Author | None = None


@dataclass(frozen=True)
class BranchReference:
    name: str
    commit_sha: str


def commits_to_frame(commits):
    """Flattens an iterable of CommitRecord into a DataFrame with ``COMMIT_COLUMNS``."""
    ds = [
        [
            x.commit_sha,
            x.timestamp,
            x.message,
            x.author.name if x.author is not None else None,
            x.author.email if x.author is not None else None,
        ]
        for x in commits
    ]
    df = DataFrame(ds, columns=COMMIT_COLUMNS)
    df["date"] = pd.to_datetime(df["date"], utc=True)
    return df


def merge_commits(branch_commits, config):
    """
    Merges the commit lists of several branches into one filtered set.

    Commits shared between branches are kept once (first occurrence wins). A commit survives
    the filters when it is strictly after ``config.since``, strictly before ``config.until``
    and, if merge requests are excluded, its message does not start with ``"Merge "``.

    :param branch_commits: iterable of per-branch iterables of CommitRecord
    :param config: RunConfig
    :return: DataFrame with columns commit_sha, date, message, author_name, author_email
    """
    df = commits_to_frame(itertools.chain.from_iterable(branch_commits))
    unique = df.drop_duplicates(subset="commit_sha", keep="first")
    logger.debug(f"Merged {len(df)} branch commits into {len(unique)} unique commits")

    keep = pd.Series(True, index=unique.index)
    if config.since is not ALWAYS:
        keep &= unique["date"] > config.since
    if config.until is not ALWAYS:
        keep &= unique["date"] < config.until
    if not config.merge_requests:
        keep &= ~unique["message"].astype(str).str.startswith(MERGE_PREFIX)

    filtered = unique[keep].reset_index(drop=True)
    logger.info(f"Kept {len(filtered)} of {len(unique)} unique commits after date and merge filters")
    return filtered


def group_by_author(commits, config):
    """
    Partitions filtered commits by canonical author email.

    Groups come back in order of first appearance in ``commits``; the display name of each
    group is the author name of its first commit.

    :param commits: DataFrame as returned by merge_commits
    :param config: RunConfig, for its email aliases
    :return: list of (email, name, DataFrame) tuples
    """
    if commits.empty:
        return []

    commits = commits.assign(email=commits["author_email"].map(config.alias))
    groups = []
    for email, group in commits.groupby("email", sort=False):
        name = group["author_name"].iloc[0]
        groups.append((email, name if isinstance(name, str) else "unknown", group))

    logger.debug(f"Grouped {len(commits)} commits into {len(groups)} authors")
    return groups
