"""
Intric backend sysadmin API client.

Authenticates with the super API key from the override file and creates the
first tenant and its admin user. Neither operation looks for an existing
resource first: running them twice lets the backend reject the duplicate.
"""

from typing import Any, Dict, List, Optional

from intric_deploy.api_client import ApiClient
from intric_deploy.errors import MissingFieldError

ADMIN_ROLE_NAME = "Admin"


class IntricSysadminClient(ApiClient):
    """Client for /api/v1/sysadmin on the Intric backend."""

    def __init__(self, backend_url: str, api_key: str, verify: bool = True):
        super().__init__(
            f"{backend_url.rstrip('/')}/api/v1/sysadmin",
            headers={
                "api-key": api_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            verify=verify,
        )

    def create_tenant(self, name: str, zitadel_org_id: str) -> str:
        """Create a tenant linked to a Zitadel organization and return its id."""
        response = self._make_request(
            "POST",
            "/tenants/",
            action="create tenant",
            data={"name": name, "zitadel_org_id": zitadel_org_id},
        )
        tenant_id = response.get("id") if isinstance(response, dict) else None
        if not tenant_id:
            raise MissingFieldError(f"Failed to extract tenant ID from response: {response}")
        return tenant_id

    def list_predefined_roles(self) -> List[Dict[str, Any]]:
        response = self._make_request("GET", "/predefined-roles/", action="fetch predefined roles")
        if not isinstance(response, list):
            return []
        return response

    def find_role_id(self, name: str = ADMIN_ROLE_NAME) -> str:
        roles = self.list_predefined_roles()
        for role in roles:
            if role.get("name") == name and role.get("id"):
                return role["id"]
        raise MissingFieldError(f"Could not find {name} role in predefined roles. Response: {roles}")

    def create_user(
        self,
        email: str,
        role_id: str,
        tenant_id: str,
        is_superuser: bool = True,
    ) -> Optional[str]:
        """Create a user and return its id, or None if the backend sends none."""
        response = self._make_request(
            "POST",
            "/users/",
            action="create user",
            data={
                "email": email,
                "predefined_roles": [{"id": role_id}],
                "tenant_id": tenant_id,
                "is_superuser": is_superuser,
            },
        )
        if isinstance(response, dict):
            return response.get("id")
        return None
