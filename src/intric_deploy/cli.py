#!/usr/bin/env python3
"""
Intric Deploy - Unified CLI

Usage:
    intric-deploy <command> [options]

Commands:
    setup-zitadel       Create the Zitadel project and application
    create-first-admin  Create the first tenant and admin user
    list-versions       List published Helm chart versions
"""

import argparse
import sys

from intric_deploy import __version__


def main():
    parser = argparse.ArgumentParser(
        prog="intric-deploy",
        description="CLI tools for Intric deployment setup",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  setup-zitadel       Create the Zitadel project and OIDC application, and
                      write an updated values override file
  create-first-admin  Create a tenant and the first admin user in Intric
  list-versions       List available Intric Helm chart versions

Examples:
  intric-deploy list-versions --token ghp_yourTokenHere
  intric-deploy setup-zitadel --pat PAT --overrideFileIn values-override.yaml \\
      --overrideFileOut values-override-updated.yaml
  intric-deploy create-first-admin --overrideFile values-override-updated.yaml \\
      --zitadelPat PAT --organizationName "My Company" --userEmail admin@example.com
        """
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Log HTTP requests (passed on to the command)")

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    # Add subcommand parsers (but delegate actual argument parsing to the modules)
    subparsers.add_parser(
        "setup-zitadel",
        help="Create the Zitadel project and application",
        add_help=False
    )

    subparsers.add_parser(
        "create-first-admin",
        help="Create the first tenant and admin user",
        add_help=False
    )

    subparsers.add_parser(
        "list-versions",
        help="List published Helm chart versions",
        add_help=False
    )

    # Parse only the command, leave rest for submodules
    args, remaining = parser.parse_known_args()

    if not args.command:
        parser.print_help()
        sys.exit(0)

    if args.verbose and "--verbose" not in remaining:
        remaining.append("--verbose")

    # Restore remaining args for submodule parsing
    sys.argv = [f"intric-deploy {args.command}"] + remaining

    if args.command == "setup-zitadel":
        from intric_deploy.setup_zitadel import main as cmd_main
        cmd_main()

    elif args.command == "create-first-admin":
        from intric_deploy.create_first_admin import main as cmd_main
        cmd_main()

    elif args.command == "list-versions":
        from intric_deploy.list_versions import main as cmd_main
        cmd_main()

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
