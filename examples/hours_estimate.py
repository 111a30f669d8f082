"""
Example of estimating development hours from commit history.

This example demonstrates:
1. Building a small repository with two developers and a feature branch
2. Estimating hours across all branches
3. Narrowing the estimate with a date window, a branch and email aliases
4. Looking at the results as JSON and as a DataFrame
"""

import tempfile
import time
from pathlib import Path

import git
import pandas as pd

from githours import Repository, RunConfig

__author__ = "willmcginnis"


def commit(repo, message, when, name, email):
    work_file = Path(repo.working_tree_dir) / "work.txt"
    with open(work_file, "a") as f:
        f.write(f"{message}\n")
    repo.index.add(["work.txt"])
    actor = git.Actor(name, email)
    date = f"{int(pd.Timestamp(when, tz='UTC').timestamp())} +0000"
    repo.index.commit(message, author=actor, committer=actor, author_date=date, commit_date=date)


def build_demo_repo(path):
    repo = git.Repo.init(path)
    commit(repo, "Initial commit", "2024-03-04 09:00", "Alice", "alice@example.com")
    commit(repo, "Add parser", "2024-03-04 09:25", "Alice", "alice@example.com")
    commit(repo, "Fix typo", "2024-03-04 10:00", "Bob", "bob@example.com")

    main_branch = repo.active_branch
    feature = repo.create_head("feature")
    feature.checkout()
    commit(repo, "Start feature", "2024-03-05 14:00", "Bob", "bob@work.example.com")
    commit(repo, "Finish feature", "2024-03-05 14:45", "Bob", "bob@work.example.com")

    main_branch.checkout()
    commit(repo, "Add tests", "2024-03-06 11:30", "Alice", "alice@example.com")
    return repo


if __name__ == "__main__":
    start_time = time.time()

    with tempfile.TemporaryDirectory() as tmp_dir:
        print("Building demo repository...")
        build_demo_repo(tmp_dir)
        repo = Repository(working_dir=tmp_dir)

        print("\nEstimating hours across all branches:")
        report = repo.hours_estimate()
        print(report.to_json())

        print("\nSame estimate, with bob's two addresses merged and merge commits ignored:")
        config = RunConfig(
            email_aliases={"bob@work.example.com": "bob@example.com"},
            merge_requests=False,
        )
        print(repo.hours_estimate(config).to_dataframe().to_string(index=False))

        print("\nOnly the feature branch, since March 5th:")
        config = RunConfig(branch="feature", since="2024-03-05")
        report = repo.hours_estimate(config)
        print(report.to_dataframe().to_string(index=False))
        print(f"Total: {report.total_hours:.2f} hours over {report.total_commits} commits")

        print("\nPer-branch heads:")
        print(repo.branches().to_string(index=False))

    end_time = time.time()
    print(f"\nAnalysis completed in {end_time - start_time:.2f} seconds")
