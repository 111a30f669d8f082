from datetime import datetime, timedelta, timezone

import pandas as pd
import pytest

from githours.commits import Author, CommitRecord, commits_to_frame, group_by_author, merge_commits
from githours.config import RunConfig

T0 = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)
ALICE = Author("Alice", "alice@example.com")
BOB = Author("Bob", "bob@example.com")


def record(sha, minutes=0, message="Work", author=ALICE):
    return CommitRecord(commit_sha=sha, timestamp=T0 + timedelta(minutes=minutes), message=message, author=author)


@pytest.fixture
def shared_history():
    """Three branches sharing their first two commits."""
    base = [record("a1", 0), record("a2", 10)]
    return [
        [record("m1", 30)] + base,
        [record("f1", 40, author=BOB), record("f2", 50, author=BOB)] + base,
        list(base),
    ]


class TestMergeCommits:
    def test_each_sha_appears_once(self, shared_history):
        df = merge_commits(shared_history, RunConfig())
        assert sorted(df["commit_sha"]) == ["a1", "a2", "f1", "f2", "m1"]
        assert df["commit_sha"].is_unique

    def test_columns(self, shared_history):
        df = merge_commits(shared_history, RunConfig())
        assert list(df.columns) == ["commit_sha", "date", "message", "author_name", "author_email"]
        assert str(df["date"].dt.tz) == "UTC"

    def test_empty_input(self):
        df = merge_commits([], RunConfig())
        assert df.empty
        assert "commit_sha" in df.columns

    def test_since_is_exclusive(self):
        commits = [[record("c0", 0), record("c1", 10), record("c2", 20)]]
        df = merge_commits(commits, RunConfig(since=T0 + timedelta(minutes=10)))
        assert list(df["commit_sha"]) == ["c2"]

    def test_until_is_exclusive(self):
        commits = [[record("c0", 0), record("c1", 10), record("c2", 20)]]
        df = merge_commits(commits, RunConfig(until=T0 + timedelta(minutes=10)))
        assert list(df["commit_sha"]) == ["c0"]

    def test_since_and_until_window(self):
        commits = [[record(f"c{i}", i * 10) for i in range(6)]]
        config = RunConfig(since=T0 + timedelta(minutes=5), until=T0 + timedelta(minutes=40))
        df = merge_commits(commits, config)
        assert list(df["commit_sha"]) == ["c1", "c2", "c3"]

    def test_merge_commits_dropped_when_excluded(self):
        commits = [[record("c0", 0, message="Merge branch 'x'"), record("c1", 5, message="merge fix")]]
        df = merge_commits(commits, RunConfig(merge_requests=False))
        assert list(df["commit_sha"]) == ["c1"]

    def test_merge_commits_kept_by_default(self):
        commits = [[record("c0", 0, message="Merge branch 'x'"), record("c1", 5, message="merge fix")]]
        df = merge_commits(commits, RunConfig())
        assert sorted(df["commit_sha"]) == ["c0", "c1"]

    def test_merge_prefix_must_lead(self):
        commits = [[record("c0", 0, message="Revert Merge branch 'x'"), record("c1", 5, message="Merged stuff")]]
        df = merge_commits(commits, RunConfig(merge_requests=False))
        assert sorted(df["commit_sha"]) == ["c0", "c1"]


class TestGroupByAuthor:
    def test_groups_in_first_appearance_order(self, shared_history):
        df = merge_commits(shared_history, RunConfig())
        groups = group_by_author(df, RunConfig())
        assert [(email, name, len(g)) for email, name, g in groups] == [
            ("alice@example.com", "Alice", 3),
            ("bob@example.com", "Bob", 2),
        ]

    def test_aliases_merge_identities(self):
        commits = [
            [
                record("c0", 0, author=Author("Linus", "linus@torvalds.com")),
                record("c1", 10, author=Author("Linus T", "linus@linux.com")),
            ]
        ]
        config = RunConfig(email_aliases={"linus@torvalds.com": "linus@linux.com"})
        groups = group_by_author(merge_commits(commits, config), config)
        assert len(groups) == 1
        email, name, group = groups[0]
        assert email == "linus@linux.com"
        assert name == "Linus"
        assert len(group) == 2

    def test_missing_author_is_unknown(self):
        commits = [[record("c0", 0, author=None), record("c1", 10, author=Author("Ghost", ""))]]
        groups = group_by_author(merge_commits(commits, RunConfig()), RunConfig())
        assert len(groups) == 1
        email, name, group = groups[0]
        assert email == "unknown"
        assert name == "unknown"
        assert list(group["commit_sha"]) == ["c0", "c1"]

    def test_empty(self):
        assert group_by_author(commits_to_frame([]), RunConfig()) == []


def test_commits_to_frame_normalizes_offsets():
    plus_one = timezone(timedelta(hours=1))
    rec = CommitRecord("c0", datetime(2024, 1, 1, 10, 0, tzinfo=plus_one), "Work", ALICE)
    df = commits_to_frame([rec])
    assert df["date"].iloc[0] == pd.Timestamp("2024-01-01 09:00", tz="UTC")
