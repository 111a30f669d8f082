"""
.. module:: report
   :platform: Unix, Windows
   :synopsis: Per-author work records and the aggregated hours report

"""

import json
from dataclasses import dataclass

from pandas import DataFrame

from githours.estimator import estimate_hours
from githours.logging import logger

__author__ = "willmcginnis"


@dataclass(frozen=True)
class AuthorWork:
    email: str
    name: str
    hours: float
    commits: int

    def to_dict(self):
        return {"name": self.name, "hours": self.hours, "commits": self.commits}


class HoursReport:
    """The result of an hours estimation run.

    Authors are held in ascending order of hours and are followed by a synthetic ``total``
    entry when the report is rendered.

    Args:
        authors (List[AuthorWork]): Per-author work, already sorted
        total_commits (int): Size of the filtered unique commit set

    Examples:
        >>> report = Repository('/path/to/repo').hours_estimate()
        >>> print(report.to_json())
        >>> report.to_dataframe().plot.barh(x='email', y='hours')
    """

    def __init__(self, authors, total_commits):
        self.authors = list(authors)
        self.total_commits = total_commits

    @property
    def total_hours(self):
        return sum(x.hours for x in self.authors)

    @property
    def entries(self):
        """Ordered list of (key, value) pairs: one per author, then ``("total", {...})``."""
        out = [(x.email, x.to_dict()) for x in self.authors]
        out.append(("total", {"hours": self.total_hours, "commits": self.total_commits}))
        return out

    def to_dict(self):
        """
        Returns the entries as a plain dict, in report order.

        An author whose canonical email is literally ``total`` shares its key with the total entry;
        the total wins and a warning is logged. Use :attr:`entries` to see both.

        :return: dict
        """
        out = {}
        for key, value in self.entries:
            if key in out:
                logger.warning(f"Report entry '{key}' collides with another entry and is overwritten in the dict output")
            out[key] = value
        return out

    def to_json(self, indent=2):
        return json.dumps(self.to_dict(), indent=indent)

    def to_dataframe(self):
        """
        Returns the per-author rows (without the total) as a DataFrame.

        :return: DataFrame with columns email, name, hours, commits
        """
        ds = [[x.email, x.name, x.hours, x.commits] for x in self.authors]
        return DataFrame(ds, columns=["email", "name", "hours", "commits"])

    def __len__(self):
        return len(self.authors)

    def __repr__(self):
        return f"<HoursReport authors={len(self.authors)} hours={self.total_hours:.2f} commits={self.total_commits}>"


def aggregate(groups, config, total_commits):
    """
    Estimates hours for each author group and assembles the report.

    :param groups: list of (email, name, DataFrame) as returned by group_by_author
    :param config: RunConfig
    :param total_commits: number of commits in the filtered unique set
    :return: HoursReport
    """
    works = [
        AuthorWork(
            email=email,
            name=name,
            hours=estimate_hours(
                group["date"],
                max_commit_diff=config.max_commit_diff,
                first_commit_add=config.first_commit_add,
            ),
            commits=len(group),
        )
        for email, name, group in groups
    ]

    # sorted() is stable, so equal hours keep grouping order
    works = sorted(works, key=lambda x: x.hours)

    report = HoursReport(works, total_commits=total_commits)
    logger.info(f"Estimated {report.total_hours:.2f} hours over {total_commits} commits by {len(works)} authors")
    return report
