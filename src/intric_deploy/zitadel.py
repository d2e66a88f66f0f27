"""
Zitadel API client.

Talks to the management and auth APIs of a Zitadel instance with a Personal
Access Token, and provides find-or-create helpers for the project and the
OIDC web application used by the Intric frontend.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from intric_deploy.api_client import ApiClient
from intric_deploy.errors import MissingFieldError

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "production"
DEFAULT_APP_NAME = "Intric"


class Outcome(Enum):
    FOUND = "found"
    CREATED = "created"


@dataclass
class EnsureResult:
    """Result of an ensure-or-create call."""

    outcome: Outcome
    id: str
    resource: Dict[str, Any] = field(default_factory=dict)
    client_id: Optional[str] = None

    @property
    def created(self) -> bool:
        return self.outcome is Outcome.CREATED


def _dig(data: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def project_payload(name: str) -> Dict[str, Any]:
    return {
        "name": name,
        "projectRoleAssertion": True,
        "projectRoleCheck": False,
        "hasProjectCheck": True,
        "privateLabelingSetting": "PRIVATE_LABELING_SETTING_ENFORCE_PROJECT_RESOURCE_OWNER_POLICY",
    }


def oidc_app_payload(name: str, frontend_url: str) -> Dict[str, Any]:
    """Web application using authorization code + PKCE (no client secret)."""
    return {
        "name": name,
        "redirectUris": [f"{frontend_url}/login/callback"],
        "postLogoutRedirectUris": [f"{frontend_url}/logout"],
        "responseTypes": ["OIDC_RESPONSE_TYPE_CODE"],
        "grantTypes": ["OIDC_GRANT_TYPE_AUTHORIZATION_CODE"],
        "appType": "OIDC_APP_TYPE_WEB",
        "authMethodType": "OIDC_AUTH_METHOD_TYPE_NONE",
        "version": "OIDC_VERSION_1_0",
        "devMode": False,
        "accessTokenType": "OIDC_TOKEN_TYPE_BEARER",
        "idTokenRoleAssertion": True,
        "idTokenUserinfoAssertion": True,
        "clockSkew": "0s",
        "additionalOrigins": [],
    }


class ZitadelClient(ApiClient):
    """Zitadel management/auth API client with PAT authentication."""

    def __init__(self, zitadel_url: str, pat: str):
        super().__init__(
            zitadel_url,
            headers={
                "Authorization": f"Bearer {pat}",
                "Content-Type": "application/json",
            },
        )

    # Auth API

    def get_current_user(self) -> Dict[str, Any]:
        return self._make_request("GET", "/auth/v1/users/me", action="get current Zitadel user")

    def get_organization_id(self) -> str:
        """Return the id of the organization that owns the PAT's user."""
        response = self.get_current_user()
        org_id = _dig(response, "user", "details", "resourceOwner")
        if not org_id:
            raise MissingFieldError(f"Failed to get Zitadel organization ID. Response: {response}")
        return org_id

    # Projects

    def verify_token(self) -> None:
        """Raise ApiError if the PAT cannot search projects."""
        self._make_request("POST", "/management/v1/projects/_search", action="verify PAT", data={})

    def search_projects(self) -> List[Dict[str, Any]]:
        response = self._make_request(
            "POST", "/management/v1/projects/_search", action="search projects", data={}
        )
        return response.get("result", [])

    def find_project(self, name: str) -> Optional[Dict[str, Any]]:
        for project in self.search_projects():
            if project.get("name") == name:
                return project
        return None

    def create_project(self, name: str) -> Dict[str, Any]:
        response = self._make_request(
            "POST", "/management/v1/projects", action="create project", data=project_payload(name)
        )
        if not response.get("id"):
            raise MissingFieldError(f"Failed to extract project ID from response: {response}")
        return response

    def ensure_project(self, name: str = DEFAULT_PROJECT_NAME) -> EnsureResult:
        """Return the project named ``name``, creating it if absent."""
        existing = self.find_project(name)
        if existing:
            if not existing.get("id"):
                raise MissingFieldError(f"Project '{name}' has no ID: {existing}")
            logger.debug("project %s found: %s", name, existing["id"])
            return EnsureResult(Outcome.FOUND, existing["id"], existing)

        created = self.create_project(name)
        logger.debug("project %s created: %s", name, created["id"])
        return EnsureResult(Outcome.CREATED, created["id"], created)

    # Applications

    def search_apps(self, project_id: str) -> List[Dict[str, Any]]:
        response = self._make_request(
            "POST",
            f"/management/v1/projects/{project_id}/apps/_search",
            action="search applications",
            data={},
        )
        return response.get("result", [])

    def find_app(self, project_id: str, name: str) -> Optional[Dict[str, Any]]:
        for app in self.search_apps(project_id):
            if app.get("name") == name:
                return app
        return None

    def get_app(self, project_id: str, app_id: str) -> Dict[str, Any]:
        return self._make_request(
            "GET",
            f"/management/v1/projects/{project_id}/apps/{app_id}",
            action="get application details",
        )

    def get_client_id(self, project_id: str, app_id: str) -> str:
        details = self.get_app(project_id, app_id)
        client_id = _dig(details, "app", "oidcConfig", "clientId")
        if not client_id:
            raise MissingFieldError(
                f"Failed to get client ID for existing application. Response: {details}"
            )
        return client_id

    def create_oidc_app(self, project_id: str, name: str, frontend_url: str) -> Dict[str, Any]:
        response = self._make_request(
            "POST",
            f"/management/v1/projects/{project_id}/apps/oidc",
            action="create application",
            data=oidc_app_payload(name, frontend_url),
        )
        if not response.get("appId"):
            raise MissingFieldError(f"Failed to extract application ID from response: {response}")
        if not response.get("clientId"):
            raise MissingFieldError(f"Failed to extract client ID from response: {response}")
        return response

    def ensure_application(
        self,
        project_id: str,
        frontend_url: str,
        name: str = DEFAULT_APP_NAME,
    ) -> EnsureResult:
        """Return the OIDC application named ``name``, creating it if absent.

        The result always carries the OIDC client id; for an existing
        application it is read from the application details, since the
        search result does not include it.
        """
        existing = self.find_app(project_id, name)
        if existing:
            app_id = existing.get("id")
            if not app_id:
                raise MissingFieldError(f"Application '{name}' has no ID: {existing}")
            client_id = self.get_client_id(project_id, app_id)
            return EnsureResult(Outcome.FOUND, app_id, existing, client_id=client_id)

        created = self.create_oidc_app(project_id, name, frontend_url)
        return EnsureResult(Outcome.CREATED, created["appId"], created, client_id=created["clientId"])
