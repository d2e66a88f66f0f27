#!/usr/bin/env python3
"""
Intric - Available Helm Chart Versions

Fetches the published versions of the Intric Helm chart from GitHub
Container Registry and prints their tags, newest first.

Usage:
    intric-deploy list-versions --token ghp_yourTokenHere

    export GITHUB_TOKEN=ghp_yourTokenHere
    intric-deploy list-versions
"""

import argparse
import sys
from typing import List, Optional

from intric_deploy import console, settings
from intric_deploy.errors import DeployError
from intric_deploy.registry import DEFAULT_ORG, DEFAULT_PACKAGE, RegistryClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intric-deploy list-versions",
        description="Fetch available versions of the Intric Helm chart from GitHub Container Registry",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment variables:
  GITHUB_TOKEN    Alternative way to provide the token
        """
    )
    parser.add_argument("-t", "--token", help="GitHub Personal Access Token (required)")
    parser.add_argument("--org", default=DEFAULT_ORG, help=f"Package owner (default: {DEFAULT_ORG})")
    parser.add_argument(
        "--package",
        default=DEFAULT_PACKAGE,
        help=f"Container package name (default: {DEFAULT_PACKAGE})"
    )
    parser.add_argument(
        "--per-page",
        type=int,
        help="Number of package versions to fetch (GitHub default: 30, max: 100)"
    )
    parser.add_argument("--verbose", action="store_true", help="Log HTTP requests")
    return parser


def run(args: argparse.Namespace) -> None:
    token = settings.require(
        settings.resolve(args.token, "GITHUB_TOKEN"),
        "GitHub token is required. Provide it via --token flag or GITHUB_TOKEN environment variable.",
    )
    for tag in RegistryClient(token).list_tags(args.org, args.package, args.per_page):
        print(tag)


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    console.configure_logging(args.verbose)
    try:
        run(args)
    except DeployError as e:
        console.fail(str(e))


if __name__ == "__main__":
    main(sys.argv[1:])
