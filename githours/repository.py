"""
.. module:: repository
   :platform: Unix, Windows
   :synopsis: A module for estimating hours worked on a single git repository

.. moduleauthor:: Will McGinnis <will@pedalwrencher.com>


"""

import logging
import os
from datetime import datetime, timezone

from git import BadName, BadObject, GitCommandError, InvalidGitRepositoryError, NoSuchPathError, Repo
from joblib import Parallel, delayed
from pandas import DataFrame

from githours.commits import Author, BranchReference, CommitRecord, group_by_author, merge_commits
from githours.config import RunConfig
from githours.exceptions import ConfigError, InvalidRepositoryError, ShallowRepositoryError, TraversalError
from githours.logging import logger
from githours.report import aggregate

__author__ = "willmcginnis"

HEADS_PREFIX = "refs/heads/"


# Function for joblib.
def _walk_func(repository, reference):
    commits = list(repository.walk(reference))
    logger.debug(f"Walked {len(commits)} commits on branch '{reference.name}'")
    return commits


class Repository:
    """A class for estimating the hours spent on a single local git repository.

    The repository is only ever read. Shallow clones are rejected up front since their
    truncated history would under count the work.

    Args:
        working_dir (Optional[str]): Path to the git repository. If None, uses the current
            working directory.

    Attributes:
        git_dir (str): Path to the git repository
        repo (git.Repo): GitPython Repo instance

    Raises:
        InvalidRepositoryError: If the path does not exist or is not a git repository
        ShallowRepositoryError: If the repository is a shallow clone

    Examples:
        >>> repo = Repository('/path/to/repo')
        >>> report = repo.hours_estimate(RunConfig(since='lastweek'))
        >>> print(report.to_json())
    """

    def __init__(self, working_dir=None):
        self.git_dir = os.getcwd() if working_dir is None else str(working_dir)

        try:
            self.repo = Repo(self.git_dir)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            logger.error(f"Not a git repository: {self.git_dir}")
            raise InvalidRepositoryError(f"Not a git repository: {self.git_dir}") from e

        if self.is_shallow():
            logger.error(f"Repository at {self.git_dir} is a shallow clone")
            raise ShallowRepositoryError(self.git_dir)

        logger.info(f"Repository [{self.repo_name}] instantiated at directory: {self.git_dir}")

    @property
    def repo_name(self):
        return os.path.basename(os.path.normpath(self.git_dir))

    def is_shallow(self):
        """Checks if this repository is a shallow clone.

        Returns:
            bool: True if git keeps a ``shallow`` file for this repository
        """
        # linked worktrees share the shallow file of the main repository
        return os.path.exists(os.path.join(self.repo.common_dir, "shallow"))

    def references(self, branch=None):
        """Lists the local branch references, sorted by name.

        Args:
            branch (Optional[str]): Only return this branch. Either a short name (``main``) or a
                full ref name (``refs/heads/main``).

        Returns:
            List[BranchReference]: One entry per local branch

        Raises:
            ConfigError: If ``branch`` is given but no such local branch exists
        """
        refs = []
        for head in sorted(self.repo.heads, key=lambda x: x.name):
            try:
                refs.append(BranchReference(name=head.name, commit_sha=head.commit.hexsha))
            except ValueError as e:
                raise TraversalError(head.name, e) from e

        if branch is not None:
            if branch.startswith(HEADS_PREFIX):
                branch = branch[len(HEADS_PREFIX) :]
            refs = [x for x in refs if x.name == branch]
            if not refs:
                logger.error(f"Branch '{branch}' does not exist in repository '{self.repo_name}'")
                raise ConfigError(f"Branch '{branch}' does not exist in repository '{self.repo_name}'")

        logger.debug(f"Found {len(refs)} branch references: {[x.name for x in refs]}")
        return refs

    def branches(self):
        """Returns the local branches of the repository.

        Returns:
            pandas.DataFrame: A DataFrame with columns:
                - branch (str): Name of the branch
                - commit_sha (str): Sha of the branch head
                - repository (str): Repository name
        """
        logger.info("Fetching local branches.")
        df = DataFrame([[x.name, x.commit_sha] for x in self.references()], columns=["branch", "commit_sha"])
        df["repository"] = self.repo_name
        return df

    def has_branch(self, branch):
        """Checks if a local branch exists in the repository.

        Args:
            branch (str): Name of the branch to check

        Returns:
            bool: True if the branch exists, False otherwise
        """
        try:
            self.references(branch=branch)
        except ConfigError:
            return False
        return True

    def walk(self, reference):
        """Walks the history of one branch, newest first.

        Follows every parent, so a merge commit brings in the history of all merged branches;
        each commit is produced once. The walk is lazy and single pass.

        Each walk reads through its own GitPython handle, so walks of several branches can run
        on different threads.

        Args:
            reference (BranchReference): The branch to walk

        Yields:
            CommitRecord: One per commit reachable from the branch head

        Raises:
            TraversalError: If git fails or an object cannot be read
        """
        logger.debug(f"Walking history of branch '{reference.name}' from {reference.commit_sha}")
        try:
            with Repo(self.git_dir) as repo:
                for x in repo.iter_commits(reference.commit_sha):
                    yield self._to_record(x)
        except (GitCommandError, BadName, BadObject, ValueError, OSError) as e:
            logger.error(f"Error walking branch '{reference.name}' in repository '{self.repo_name}': {e}")
            raise TraversalError(reference.name, e) from e

    @staticmethod
    def _to_record(commit):
        actor = commit.author
        author = None
        if actor is not None and (actor.name or actor.email):
            author = Author(name=actor.name, email=actor.email)

        message = commit.message
        if isinstance(message, bytes):
            message = message.decode("utf-8", errors="replace")

        return CommitRecord(
            commit_sha=commit.hexsha,
            timestamp=datetime.fromtimestamp(commit.committed_date, tz=timezone.utc),
            message=message,
            author=author,
        )

    def commit_history(self, config=None, n_jobs=-1):
        """
        Returns the merged, deduplicated and filtered commits of every branch in scope.

        Branches are walked concurrently, one task per branch, and joined in branch name order.
        A failure on any branch aborts the whole call.

        Args:
            config (Optional[RunConfig]): Run settings. Defaults to ``RunConfig()``.
            n_jobs (int): Number of concurrent branch walks, as understood by joblib. Defaults to -1 (all cores).

        Returns:
            DataFrame: A DataFrame with columns:
                - commit_sha (str): Commit hash
                - date (datetime): Committer date, UTC
                - message (str): Commit message
                - author_name (str): Author name, None if absent
                - author_email (str): Author email, None if absent
        """
        if config is None:
            config = RunConfig()

        refs = self.references(branch=config.branch)
        logger.info(f"Walking {len(refs)} branches of repository '{self.repo_name}'")

        branch_commits = Parallel(n_jobs=n_jobs, backend="threading", verbose=0)(
            delayed(_walk_func)(self, x) for x in refs
        )

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Collected {sum(len(x) for x in branch_commits)} commits across {len(refs)} branches")

        return merge_commits(branch_commits, config)

    def hours_estimate(self, config=None, n_jobs=-1):
        """
        inspired by: https://github.com/kimmobrunfeldt/git-hours

        Estimates the hours each author spent on the repository from the timing of their commits.
        Commits are grouped by author email (after alias resolution) and each author's commit times
        are turned into hours with :func:`githours.estimator.estimate_hours`.

        :param config: (optional, default=None) RunConfig, None for the defaults
        :param n_jobs: (optional, default=-1) number of concurrent branch walks
        :return: HoursReport
        """
        if config is None:
            config = RunConfig()

        logger.info(f"Starting hours estimation for repository '{self.repo_name}'")

        commits = self.commit_history(config=config, n_jobs=n_jobs)
        groups = group_by_author(commits, config)
        report = aggregate(groups, config, total_commits=len(commits))

        logger.info(f"Finished hours estimation for '{self.repo_name}'. Found data for {len(report)} authors.")
        return report

    def __str__(self):
        return f"git repository: {self.repo_name} at: {self.git_dir}"

    def __repr__(self):
        return f"<Repository {self.repo_name} at {self.git_dir}>"
