#!/usr/bin/env python3
"""
Intric - First User Setup

Creates a tenant and the first admin user in an Intric deployment. The
tenant is linked to the Zitadel organization that owns the given PAT.

Usage:
    # Basic usage (will prompt for org name and email)
    intric-deploy create-first-admin \\
        --overrideFile helm/intric/values-override.yaml \\
        --zitadelPat "your-zitadel-pat"

    # Non-interactive mode
    intric-deploy create-first-admin \\
        --overrideFile helm/intric/values-override.yaml \\
        --zitadelPat "your-pat" \\
        --organizationName "My Company" \\
        --userEmail "admin@example.com"
"""

import argparse
import sys
from typing import List, Optional

from intric_deploy import console, settings
from intric_deploy.errors import DeployError, ExtractionError
from intric_deploy.intric import ADMIN_ROLE_NAME, IntricSysadminClient
from intric_deploy.override_file import extract, find_first, load_override_file
from intric_deploy.zitadel import ZitadelClient


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intric-deploy create-first-admin",
        description="Create a tenant and the first admin user in Intric",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment variables:
  ZITADEL_PAT          Alternative way to provide Zitadel PAT
  ORGANIZATION_NAME    Alternative way to provide organization name
  USER_EMAIL           Alternative way to provide user email
        """
    )
    parser.add_argument("--overrideFile", help="Path to values-override.yaml (required)")
    parser.add_argument("--zitadelPat", help="Zitadel Personal Access Token (required)")
    parser.add_argument(
        "--zitadelHost",
        help="Zitadel host (e.g., login.example.com). Extracted from the override file if omitted"
    )
    parser.add_argument("--organizationName", help="Organization/Tenant name (prompted if omitted)")
    parser.add_argument("--userEmail", help="Email for the first admin user (prompted if omitted)")
    parser.add_argument(
        "--insecure",
        action="store_true",
        help="Skip TLS certificate verification for the Intric backend"
    )
    parser.add_argument("--verbose", action="store_true", help="Log HTTP requests")
    return parser


def run(args: argparse.Namespace) -> None:
    override_file = settings.require(
        args.overrideFile,
        "Override file is required. Provide it via --overrideFile option.",
    )
    document = load_override_file(override_file).document
    pat = settings.require(
        settings.resolve(args.zitadelPat, "ZITADEL_PAT"),
        "Zitadel PAT is required. Provide it via --zitadelPat option or ZITADEL_PAT environment variable.",
    )
    organization_name = settings.resolve(args.organizationName, "ORGANIZATION_NAME")
    user_email = settings.resolve(args.userEmail, "USER_EMAIL")

    console.info(f"Using override file: {override_file}")
    console.info("Extracting configuration from override file...")

    try:
        backend_url = settings.ensure_url(extract(document, "ingress.backendHost"))
    except ExtractionError as e:
        raise ExtractionError(f"Could not extract backend host from {override_file}") from e
    console.success(f"Backend URL: {backend_url}")

    if args.zitadelHost:
        zitadel_url = settings.ensure_url(args.zitadelHost)
        console.success(f"Using provided Zitadel host: {args.zitadelHost}")
    else:
        try:
            zitadel_url = settings.ensure_url(find_first(document, "zitadelEndpoint"))
        except ExtractionError as e:
            raise ExtractionError(
                f"Could not extract zitadelEndpoint from {override_file}. "
                "Please provide it via --zitadelHost option."
            ) from e
        console.success("Extracted Zitadel URL from override file")
    console.success(f"Zitadel URL: {zitadel_url}")

    try:
        super_api_key = find_first(document, "intricSuperApiKey")
    except ExtractionError as e:
        raise ExtractionError(f"Could not extract intricSuperApiKey from {override_file}") from e
    console.success("Super API Key found")

    console.info("Fetching Zitadel organization information...")
    zitadel_org_id = ZitadelClient(zitadel_url, pat).get_organization_id()
    console.success(f"Zitadel Organization ID: {zitadel_org_id}")

    organization_name = settings.prompt_if_missing(organization_name, "Organization Name")
    user_email = settings.prompt_if_missing(user_email, "Admin User Email")
    settings.require(organization_name, "Organization Name is required")
    settings.require(user_email, "User Email is required")

    console.banner("Intric First User Setup")
    print(f"  Backend URL: {backend_url}")
    print(f"  Organization: {organization_name}")
    print(f"  Zitadel Org ID: {zitadel_org_id}")
    print(f"  Admin Email: {user_email}")
    print()

    if args.insecure:
        console.warning("TLS certificate verification is disabled for the Intric backend")
    intric = IntricSysadminClient(backend_url, super_api_key, verify=not args.insecure)

    console.info(f"Creating tenant '{organization_name}'...")
    tenant_id = intric.create_tenant(organization_name, zitadel_org_id)
    console.success(f"Tenant created successfully (ID: {tenant_id})")

    console.info("Fetching predefined roles...")
    role_id = intric.find_role_id(ADMIN_ROLE_NAME)
    console.success(f"Found {ADMIN_ROLE_NAME} role (ID: {role_id})")

    console.info(f"Creating admin user '{user_email}'...")
    user_id = intric.create_user(user_email, role_id, tenant_id, is_superuser=True)
    if user_id:
        console.success(f"Admin user created successfully (ID: {user_id})")
    else:
        console.success("Admin user created successfully")

    console.banner("✅ Setup Complete!")
    print(f"  Organization: {organization_name}")
    print(f"  Tenant ID: {tenant_id}")
    print(f"  Admin Email: {user_email}")
    print(f"  Admin Role ID: {role_id}")
    print("  Superuser: Yes")
    console.banner("Next Steps:")
    print("1. The user should receive a Zitadel invitation email at:")
    print(f"   {user_email}")
    print()
    print("2. Have the user click the link in the email to set their password")
    print()
    print("3. The user can then login at your frontend URL with:")
    print(f"   - Email: {user_email}")
    print("   - Password: (set via Zitadel invitation)")
    print()
    print("4. As a superuser, this user has full administrative access")
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
