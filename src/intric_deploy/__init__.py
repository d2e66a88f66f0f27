"""
Intric Deploy - CLI tools for Intric deployment setup.

This package provides command-line tools for:
- Provisioning the Zitadel project and OIDC application (setup-zitadel)
- Creating the first tenant and admin user (create-first-admin)
- Listing published Helm chart versions (list-versions)
"""

__version__ = "0.1.0"
__author__ = "Intric Deploy Contributors"

__all__ = [
    "__version__",
]
