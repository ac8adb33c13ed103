"""CLI entry point for gitlab-trigger."""

import argparse
import sys

from .gitlab import GitLabClient, build_http_client
from .settings import ConfigError, load_settings
from .trigger import PipelineTrigger


def _log(msg: str):
    sys.stderr.write(f"{msg}\n")
    sys.stderr.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gitlab-trigger",
        description="Trigger a GitLab pipeline and start its first job if the branch has a recent commit",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--branch",
        default=None,
        help="Branch to check and build (default: $GITLAB_BRANCH or master)",
    )
    parser.add_argument(
        "--weeks",
        type=int,
        default=None,
        help="Freshness window in weeks (default: $GITLAB_COMMIT_AGE_WEEKS or 2)",
    )
    parser.add_argument(
        "--api-url",
        default=None,
        help="GitLab API base URL (default: https://gitlab.com/api/v4)",
    )
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Disable TLS certificate verification",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Per-request timeout in seconds (default: 30)",
    )
    return parser


def main(argv=None, transport=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings(
            branch=args.branch,
            commit_age_weeks=args.weeks,
            api_url=args.api_url,
            verify_ssl=False if args.insecure else None,
            timeout=args.timeout,
        )
    except ConfigError as e:
        _log(f"Configuration error: {e}")
        return 1

    if not settings.verify_ssl:
        _log("Warning: TLS certificate verification is disabled")

    client = GitLabClient(settings, build_http_client(settings, transport=transport))
    try:
        result = PipelineTrigger(client).run()
    finally:
        client.close()
    return result.exit_code


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()
