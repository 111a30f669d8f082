"""
.. module:: estimator
   :platform: Unix, Windows
   :synopsis: Turns one author's commit times into an hours estimate

inspired by: https://github.com/kimmobrunfeldt/git-hours

"""

import numpy as np
import pandas as pd

from githours.config import DEFAULT_FIRST_COMMIT_ADD, DEFAULT_MAX_COMMIT_DIFF

__author__ = "willmcginnis"


def _to_minutes(dates):
    ts = pd.Series(list(dates))
    if ts.empty:
        return np.array([], dtype=float)
    if pd.api.types.is_numeric_dtype(ts):
        # epoch seconds
        return ts.to_numpy(dtype=float) / 60.0
    ts = pd.to_datetime(ts, utc=True)
    return ((ts - pd.Timestamp(0, tz="UTC")) / pd.Timedelta(minutes=1)).to_numpy(dtype=float)


def estimate_hours(dates, max_commit_diff=DEFAULT_MAX_COMMIT_DIFF, first_commit_add=DEFAULT_FIRST_COMMIT_ADD):
    """
    Estimates hours worked from a set of commit times.

    The first commit is credited ``first_commit_add`` minutes. Each following commit (in time
    order) closer than ``max_commit_diff`` minutes to its predecessor continues the session and
    adds the gap; otherwise it starts a new session and adds ``min(gap, first_commit_add)``.

    :param dates: commit times in any order, as datetimes, pandas Timestamps or epoch seconds
    :param max_commit_diff: (optional, default=60) session gap threshold in minutes, compared strictly
    :param first_commit_add: (optional, default=30) minutes credited for starting a session
    :return: float hours, 0.0 for no commits
    """
    minutes = np.sort(_to_minutes(dates))
    if minutes.size == 0:
        return 0.0

    diffs = np.diff(minutes)
    credited = np.where(diffs < max_commit_diff, diffs, np.minimum(diffs, first_commit_add))
    return float((first_commit_add + credited.sum()) / 60.0)
