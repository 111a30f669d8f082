"""
.. module:: cli
   :platform: Unix, Windows
   :synopsis: The ``git-hours`` command

"""

import argparse
import sys

from githours import __version__
from githours.config import DEFAULT_FIRST_COMMIT_ADD, DEFAULT_MAX_COMMIT_DIFF, RunConfig
from githours.exceptions import GitHoursError, ShallowRepositoryError
from githours.logging import configure_cli_logging, logger
from githours.repository import Repository

__author__ = "willmcginnis"

EPILOG = """examples:

  Estimate hours of project
      $ git-hours

  Estimate hours in repository where developers commit more seldom: they might have 4h (240min)
  pause between commits
      $ git-hours --max-commit-diff 240

  Estimate hours in repository where developer works 5 hours before first commit in day
      $ git-hours --first-commit-add 300

  Estimate hours work in repository since yesterday
      $ git-hours --since yesterday

  Estimate hours work in repository since 2015-01-31
      $ git-hours --since 2015-01-31

  Estimate hours work in repository on the "master" branch
      $ git-hours --branch master
"""


def build_parser():
    parser = argparse.ArgumentParser(
        prog="git-hours",
        description="Estimate time spent on a git repository from the timing of its commits.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-d",
        "--max-commit-diff",
        type=int,
        default=None,
        help="maximum difference in minutes between commits counted to one session. "
        f"Default: {DEFAULT_MAX_COMMIT_DIFF}",
    )
    parser.add_argument(
        "-a",
        "--first-commit-add",
        type=int,
        default=None,
        help=f"how many minutes first commit of session should add to total. Default: {DEFAULT_FIRST_COMMIT_ADD}",
    )
    parser.add_argument(
        "-s",
        "--since",
        default="always",
        help="Analyze data since certain date. [always|yesterday|today|lastweek|thisweek|yyyy-mm-dd] "
        "Default: always",
    )
    parser.add_argument(
        "-u",
        "--until",
        default="always",
        help="Analyze data until certain date. [always|yesterday|today|lastweek|thisweek|yyyy-mm-dd] "
        "Default: always",
    )
    parser.add_argument(
        "-e",
        "--email",
        action="append",
        default=[],
        metavar="emailOther=emailMain",
        help="Group person by email address. May be given several times. Default: none",
    )
    parser.add_argument(
        "-m",
        "--merge-request",
        default=None,
        metavar="[false|true]",
        help="Include merge requests into calculation. Any value other than true counts as false. Default: true",
    )
    parser.add_argument("-p", "--path", default=".", help="Git repository to analyze. Default: .")
    parser.add_argument(
        "-b",
        "--branch",
        default=None,
        help="Analyze only data on the specified branch. Default: all local branches",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress to stderr")
    parser.add_argument("--log-file", default=None, help="Also write a debug log to this file")
    return parser


def main(argv=None):
    """Entry point for ``git-hours``; prints the report as JSON and returns the exit code."""
    args = build_parser().parse_args(argv)
    configure_cli_logging(verbose=args.verbose, log_file=args.log_file)

    try:
        repo = Repository(working_dir=args.path)
        config = RunConfig.from_options(
            max_commit_diff=args.max_commit_diff,
            first_commit_add=args.first_commit_add,
            since=args.since,
            until=args.until,
            emails=args.email,
            merge_request=args.merge_request,
            branch=args.branch,
        )
        report = repo.hours_estimate(config=config)
    except ShallowRepositoryError as e:
        logger.debug(f"Refusing shallow repository: {e.path}")
        print("Cannot analyze shallow copies!", file=sys.stderr)
        print("Please run git fetch --unshallow before continuing!", file=sys.stderr)
        return e.exit_code
    except GitHoursError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return e.exit_code

    print(report.to_json(indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
