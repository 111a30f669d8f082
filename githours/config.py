"""
.. module:: config
   :platform: Unix, Windows
   :synopsis: Run configuration, date shorthand and email alias parsing

"""

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType

import pandas as pd

from githours.exceptions import ConfigError
from githours.logging import logger

__author__ = "willmcginnis"

# Sentinel for an open-ended since/until bound
ALWAYS = "always"

DEFAULT_MAX_COMMIT_DIFF = 60
DEFAULT_FIRST_COMMIT_ADD = 30

DATE_SHORTHANDS = ("always", "today", "yesterday", "thisweek", "lastweek")


def _local_now():
    return pd.Timestamp(datetime.now().astimezone())


def _invalid_date_message(value):
    return f"Invalid date '{value}': expected one of {', '.join(DATE_SHORTHANDS)} or YYYY-MM-DD"


def resolve_date(value, now=None):
    """Resolves a since/until value into a UTC timestamp or ``ALWAYS``.

    Accepted values are ``always``, ``today``, ``yesterday``, ``thisweek`` (midnight of the
    most recent Sunday), ``lastweek`` (a week before that), any date or datetime string pandas
    can parse (``YYYY-MM-DD`` being the usual one), or a datetime object. Naive dates are
    read in the local timezone of ``now``.

    :param value: the raw value, None is treated as ``always``
    :param now: (optional, default=None) a timezone aware "current time", defaults to the local clock
    :return: pandas.Timestamp in UTC, or ALWAYS
    """
    if value is None or (isinstance(value, str) and value.strip() == ALWAYS):
        return ALWAYS

    if isinstance(value, datetime):
        ts = pd.Timestamp(value)
        if ts.tzinfo is None:
            ts = ts.tz_localize(_local_now().tzinfo)
        return ts.tz_convert("UTC")

    value = str(value).strip()
    if now is None:
        now = _local_now()
    else:
        now = pd.Timestamp(now)
        if now.tzinfo is None:
            now = now.tz_localize(_local_now().tzinfo)

    # calendar day offsets, so a DST change in between still lands on midnight
    today = now.normalize()
    since_sunday = (today.dayofweek + 1) % 7
    if value == "today":
        ts = today
    elif value == "yesterday":
        ts = today - pd.DateOffset(days=1)
    elif value == "thisweek":
        ts = today - pd.DateOffset(days=since_sunday)
    elif value == "lastweek":
        ts = today - pd.DateOffset(days=since_sunday + 7)
    else:
        try:
            ts = pd.Timestamp(value)
        except (ValueError, TypeError) as e:
            raise ConfigError(_invalid_date_message(value)) from e
        if pd.isna(ts):
            raise ConfigError(_invalid_date_message(value))
        if ts.tzinfo is None:
            ts = ts.tz_localize(now.tzinfo)

    return ts.tz_convert("UTC")


def parse_email_alias(alias):
    """Splits an ``other@example.com=main@example.com`` alias into its two emails.

    :param alias: the raw alias string
    :return: tuple of (raw email, canonical email)
    """
    if alias is None or alias.find("=") <= 0:
        raise ConfigError(f"Invalid alias: {alias!r}, expected emailOther=emailMain")

    email, canonical = alias.split("=", 1)
    email, canonical = email.strip(), canonical.strip()
    if not email or not canonical:
        raise ConfigError(f"Invalid alias: {alias!r}, expected emailOther=emailMain")
    return email, canonical


def parse_bool(value):
    """Reads a command line flag value: only ``true`` (any case) is true, anything else is false."""
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


@dataclass(frozen=True)
class RunConfig:
    """Settings for one hours estimation run.

    Args:
        max_commit_diff (float): Maximum gap in minutes between two subsequent commits for them to
            count as the same coding session. Defaults to 60.
        first_commit_add (float): Minutes credited for the first commit of a session. Defaults to 30.
        since: Only count commits strictly after this instant. ``ALWAYS``, a shorthand/date string
            or a datetime. Defaults to ``ALWAYS``.
        until: Only count commits strictly before this instant. Same forms as ``since``.
        merge_requests (bool): Whether commits whose message starts with ``"Merge "`` are counted.
            Defaults to True.
        email_aliases (Mapping[str, str]): Raw author email to canonical email.
        branch (Optional[str]): Only walk this local branch. Defaults to all local branches.

    Raises:
        ConfigError: If minutes are negative.

    Examples:
        >>> config = RunConfig(max_commit_diff=240, since="2015-01-31")
        >>> config = RunConfig(email_aliases={"linus@torvalds.com": "linus@linux.com"})
    """

    max_commit_diff: float = DEFAULT_MAX_COMMIT_DIFF
    first_commit_add: float = DEFAULT_FIRST_COMMIT_ADD
    since: object = ALWAYS
    until: object = ALWAYS
    merge_requests: bool = True
    email_aliases: object = field(default_factory=dict)
    branch: str | None = None

    def __post_init__(self):
        if self.max_commit_diff < 0:
            raise ConfigError(f"max_commit_diff must be >= 0, got {self.max_commit_diff}")
        if self.first_commit_add < 0:
            raise ConfigError(f"first_commit_add must be >= 0, got {self.first_commit_add}")

        # frozen, so normalize through object.__setattr__
        object.__setattr__(self, "since", resolve_date(self.since))
        object.__setattr__(self, "until", resolve_date(self.until))
        object.__setattr__(self, "email_aliases", MappingProxyType(dict(self.email_aliases or {})))
        object.__setattr__(self, "branch", self.branch or None)

    @classmethod
    def from_options(
        cls,
        max_commit_diff=None,
        first_commit_add=None,
        since=ALWAYS,
        until=ALWAYS,
        emails=None,
        merge_request=None,
        branch=None,
        now=None,
    ):
        """Builds a config from raw command line style values.

        :param max_commit_diff: (optional) minutes, None for the default
        :param first_commit_add: (optional) minutes, None for the default
        :param since: (optional, default='always') date shorthand or YYYY-MM-DD
        :param until: (optional, default='always') date shorthand or YYYY-MM-DD
        :param emails: (optional) iterable of ``other=main`` alias strings
        :param merge_request: (optional) 'true'/'false' or bool, None for the default
        :param branch: (optional) branch name
        :param now: (optional) reference time for date shorthands
        :return: RunConfig
        """
        aliases = dict(parse_email_alias(x) for x in (emails or []))
        config = cls(
            max_commit_diff=DEFAULT_MAX_COMMIT_DIFF if max_commit_diff is None else max_commit_diff,
            first_commit_add=DEFAULT_FIRST_COMMIT_ADD if first_commit_add is None else first_commit_add,
            since=resolve_date(since, now=now),
            until=resolve_date(until, now=now),
            merge_requests=True if merge_request is None else parse_bool(merge_request),
            email_aliases=aliases,
            branch=branch,
        )
        logger.debug(f"Built run configuration: {config}")
        return config

    def alias(self, email):
        """Returns the canonical email for a raw author email (``"unknown"`` if there is none)."""
        if not isinstance(email, str) or not email:
            return "unknown"
        return self.email_aliases.get(email, email)
