#!/usr/bin/env python3
"""
Intric - Zitadel Project Setup

Creates a project (default "production") and the "Intric" OIDC web
application in Zitadel using a Personal Access Token, then writes a copy of
the values override file with the backend's Zitadel settings filled in.
Existing project and application are reused, so the command can be rerun.

Usage:
    # Basic usage
    intric-deploy setup-zitadel --pat "your-pat" \\
        --overrideFileIn helm/intric/values-override.yaml \\
        --overrideFileOut helm/intric/values-override-updated.yaml

    # Using environment variable for PAT
    export ZITADEL_PAT="your-zitadel-pat-here"
    intric-deploy setup-zitadel --overrideFileIn values-override.yaml \\
        --overrideFileOut values-override-new.yaml

    # Custom project name and zitadel host
    intric-deploy setup-zitadel --pat "your-pat" \\
        --overrideFileIn values.yaml --overrideFileOut values-new.yaml \\
        --name staging --zitadelHost login.staging.example.com
"""

import argparse
import sys
from typing import List, Optional

from intric_deploy import console, settings
from intric_deploy.errors import DeployError, ExtractionError
from intric_deploy.override_file import (
    BACKEND_SECTION,
    extract,
    extract_any,
    load_override_file,
    patch_section,
    write_override_file,
    zitadel_backend_values,
)
from intric_deploy.zitadel import DEFAULT_APP_NAME, DEFAULT_PROJECT_NAME, ZitadelClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intric-deploy setup-zitadel",
        description="Create the Zitadel project and OIDC application for Intric "
                    "and update the values override file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment variables:
  ZITADEL_PAT     Alternative way to provide the PAT
  PROJECT_NAME    Alternative way to set the project name
        """
    )
    parser.add_argument("-p", "--pat", help="Zitadel Personal Access Token (required)")
    parser.add_argument("--overrideFileIn", help="Input values override file (required)")
    parser.add_argument("--overrideFileOut", help="Output values override file (required)")
    parser.add_argument(
        "-z", "--zitadelHost",
        help="Zitadel host (e.g., login.example.com). Extracted from the override file if omitted"
    )
    parser.add_argument(
        "-n", "--name",
        help=f"Project name to create (default: {DEFAULT_PROJECT_NAME})"
    )
    parser.add_argument(
        "--appName",
        default=DEFAULT_APP_NAME,
        help=f"Application name to create (default: {DEFAULT_APP_NAME})"
    )
    parser.add_argument("--verbose", action="store_true", help="Log HTTP requests")
    return parser


def run(args: argparse.Namespace) -> None:
    pat = settings.require(
        settings.resolve(args.pat, "ZITADEL_PAT"),
        "Zitadel PAT is required. Provide it via --pat option or ZITADEL_PAT environment variable.",
    )
    file_in = settings.require(
        args.overrideFileIn,
        "Input override file is required. Provide it via --overrideFileIn option.",
    )
    file_out = settings.require(
        args.overrideFileOut,
        "Output override file is required. Provide it via --overrideFileOut option.",
    )
    project_name = settings.resolve(args.name, "PROJECT_NAME", DEFAULT_PROJECT_NAME)
    app_name = args.appName

    override = load_override_file(file_in)
    document = override.document
    console.info(f"Input override file: {file_in}")
    console.info(f"Output override file: {file_out}")

    if args.zitadelHost:
        zitadel_host = args.zitadelHost
        console.success(f"Using provided Zitadel host: {zitadel_host}")
    else:
        console.info("Extracting Zitadel URL from input override file...")
        try:
            zitadel_host = extract_any(document, "zitadel.externalDomain", "ingress.zitadelHost")
        except ExtractionError as e:
            raise ExtractionError(
                f"Could not extract Zitadel domain from {file_in}. "
                "Please provide it via --zitadelHost option."
            ) from e
        console.success("Extracted Zitadel domain from override file")

    zitadel_url = settings.ensure_url(zitadel_host)
    console.success(f"Zitadel URL: {zitadel_url}")

    try:
        frontend_url = settings.ensure_url(extract(document, "ingress.frontendHost"))
    except ExtractionError as e:
        raise ExtractionError(
            f"Could not extract frontend host from {file_in}. Please check the file format."
        ) from e
    console.success(f"Frontend URL: {frontend_url}")

    zitadel = ZitadelClient(zitadel_url, pat)

    console.info("Verifying PAT...")
    zitadel.verify_token()
    console.success("PAT verified successfully")

    console.info(f"Checking if project '{project_name}' already exists...")
    project = zitadel.ensure_project(project_name)
    if project.created:
        console.success(f"Project created successfully! (ID: {project.id})")
    else:
        console.success(f"Project '{project_name}' already exists (ID: {project.id})")

    console.info(f"Checking if '{app_name}' application already exists...")
    app = zitadel.ensure_application(project.id, frontend_url, app_name)
    if app.created:
        console.success("Application created successfully!")
    else:
        console.success(f"Application '{app_name}' already exists (ID: {app.id})")
        console.success(f"Retrieved client ID: {app.client_id}")

    console.info("Creating output override file with updated configuration...")
    values = zitadel_backend_values(zitadel_url, project.id, app.client_id, pat)
    replaced = patch_section(override, values)
    if not replaced:
        console.warning(f"No Zitadel settings found under '{BACKEND_SECTION}' in {file_in}")
    write_override_file(override, file_out)
    console.success(f"Created output override file: {file_out}")

    console.banner("✅ Setup Successful")
    print(f"  Project Name: {project_name}")
    print(f"  Project ID: {project.id}")
    print()
    print(f"  Application Name: {app_name}")
    print(f"  Application ID: {app.id}")
    print(f"  Client ID: {app.client_id}")
    print()
    print("  Auth Method: PKCE (Public Client)")
    print(f"  Redirect URI: {frontend_url}/login/callback")
    print(f"  Post Logout URI: {frontend_url}/logout")
    print()
    print(f"  Console URL: {zitadel_url}/ui/console/projects/{project.id}/apps/{app.id}")
    print()
    print(f"  📄 Input override file: {file_in}")
    print(f"  ✅ Output override file created: {file_out}")
    print()


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    console.configure_logging(args.verbose)
    try:
        run(args)
    except DeployError as e:
        console.fail(str(e))


if __name__ == "__main__":
    main(sys.argv[1:])
