"""prsync entry point.

Inspects and changes the review state of pull requests of the configured
Bitbucket repository. Usage: prsync [-c config.yaml] <command> [args].
"""

import argparse
import sys
from pathlib import Path

from prsync.adapters import BitbucketAdapter, ReviewPlatformError
from prsync.config import AppConfig, ConfigurationError, load_config
from prsync.logging import PrSyncLogging
from prsync.models import PullRequest


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse global options and the subcommand."""
    parser = argparse.ArgumentParser(
        prog="prsync",
        description="prsync - pull request comments and approval on Bitbucket",
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yaml"),
        help="Path to YAML config file",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Only load and validate config, then exit",
    )
    sub = parser.add_subparsers(dest="command")

    prs = sub.add_parser("prs", help="List open pull requests of a source branch")
    prs.add_argument("--branch", "-b", default=None, help="Source branch (default: bitbucket.branch_name)")

    for name, help_text in (
        ("diff", "Print the diff of a pull request"),
        ("comments", "List the bot's comments on a pull request"),
        ("approve", "Approve a pull request"),
        ("unapprove", "Remove the bot's approval of a pull request"),
    ):
        cmd = sub.add_parser(name, help=help_text)
        cmd.add_argument("pr_id", type=int, help="Pull request id")

    delete = sub.add_parser("delete-comment", help="Delete a comment of a pull request")
    delete.add_argument("pr_id", type=int, help="Pull request id")
    delete.add_argument("comment_id", type=int, help="Comment id")

    args = parser.parse_args(argv)
    if not args.check and args.command is None:
        parser.error("a command is required")
    return args


def _open_pull_request(adapter: BitbucketAdapter, pr_id: int) -> PullRequest:
    for pr in adapter.list_open_pull_requests():
        if pr.id == pr_id:
            return pr
    raise ReviewPlatformError(f"No open pull request with id {pr_id}", status_code=404)


def run_command(args: argparse.Namespace, config: AppConfig, adapter: BitbucketAdapter) -> int:
    """Execute one subcommand and print its result to stdout."""
    if args.command == "prs":
        branch = args.branch or config.bitbucket.branch_name
        if not branch:
            raise ConfigurationError("No branch given and bitbucket.branch_name is not set")
        for pr in adapter.find_pull_requests_with_source_branch(branch):
            print(f"{pr.id}\t{pr.src_branch}\t{pr.src_commit_hash}\t{pr.dst_commit_hash}")
        return 0

    pr = _open_pull_request(adapter, args.pr_id)
    if args.command == "diff":
        sys.stdout.write(adapter.get_pull_request_diff(pr))
    elif args.command == "comments":
        for comment in adapter.find_own_pull_request_comments(pr):
            where = f"{comment.file_path}:{comment.line}" if comment.is_inline else "-"
            print(f"{comment.comment_id}\t{where}\t{comment.content}")
    elif args.command == "approve":
        print(adapter.approve(pr).status.value)
    elif args.command == "unapprove":
        print(adapter.unapprove(pr).status.value)
    elif args.command == "delete-comment":
        if not adapter.delete_pull_request_comment(pr, args.comment_id):
            return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point: load config, set up logging, run the command."""
    args = parse_args(argv)
    config = load_config(args.config)
    logs = PrSyncLogging(
        config.logging,
        secrets=(config.api_key_resolved, config.oauth_client_secret_resolved),
    )
    logs.setup()
    log = logs.get_logger("cli")

    try:
        config.validate_repository()
    except ConfigurationError as e:
        log.error("Invalid config: %s", e)
        return 1

    if args.check:
        print("Config OK:", f"{config.bitbucket.account_name}/{config.bitbucket.repo_slug}", config.bitbucket.identity)
        return 0

    try:
        with BitbucketAdapter.from_config(config) as adapter:
            return run_command(args, config, adapter)
    except (ReviewPlatformError, ConfigurationError) as e:
        log.exception("Command %s failed: %s", args.command, e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
