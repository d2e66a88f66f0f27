"""Tests for the Zitadel client and its ensure-or-create operations."""

import pytest

from conftest import FakeResponse, FakeZitadel
from intric_deploy.errors import ApiError, MissingFieldError
from intric_deploy.zitadel import Outcome, ZitadelClient

ZITADEL = "https://login.example.com"
PROJECTS_SEARCH = f"{ZITADEL}/management/v1/projects/_search"
PROJECTS = f"{ZITADEL}/management/v1/projects"


@pytest.fixture
def server(fake_http):
    return FakeZitadel(fake_http)


def test_client_sends_bearer_pat(fake_http, server) -> None:
    ZitadelClient(ZITADEL, "my-pat").verify_token()

    call = fake_http.calls[0]
    assert call["headers"]["Authorization"] == "Bearer my-pat"
    assert call["json"] == {}
    assert call["timeout"] == 30


def test_ensure_project_creates_then_finds(fake_http, server) -> None:
    client = ZitadelClient(ZITADEL, "pat")

    first = client.ensure_project("production")
    second = client.ensure_project("production")

    assert first.outcome is Outcome.CREATED
    assert second.outcome is Outcome.FOUND
    assert first.id == second.id == "proj-1"
    assert len(fake_http.calls_to("POST", PROJECTS)) == 1


def test_ensure_project_uses_fixed_payload(fake_http, server) -> None:
    ZitadelClient(ZITADEL, "pat").ensure_project("staging")

    payload = fake_http.calls_to("POST", PROJECTS)[0]["json"]
    assert payload == {
        "name": "staging",
        "projectRoleAssertion": True,
        "projectRoleCheck": False,
        "hasProjectCheck": True,
        "privateLabelingSetting": "PRIVATE_LABELING_SETTING_ENFORCE_PROJECT_RESOURCE_OWNER_POLICY",
    }


def test_ensure_project_matches_exact_name(fake_http, server) -> None:
    server.projects.append({"id": "other", "name": "production-old"})

    result = ZitadelClient(ZITADEL, "pat").ensure_project("production")

    assert result.outcome is Outcome.CREATED
    assert result.id != "other"


def test_ensure_application_is_idempotent(fake_http, server) -> None:
    client = ZitadelClient(ZITADEL, "pat")
    project = client.ensure_project("production")

    first = client.ensure_application(project.id, "https://app.example.com")
    second = client.ensure_application(project.id, "https://app.example.com")

    assert first.outcome is Outcome.CREATED
    assert second.outcome is Outcome.FOUND
    assert first.id == second.id
    assert first.client_id == second.client_id == "client-app-1"
    assert len(fake_http.calls_to("POST", f"{PROJECTS}/{project.id}/apps/oidc")) == 1


def test_ensure_application_payload(fake_http, server) -> None:
    client = ZitadelClient(ZITADEL, "pat")
    project = client.ensure_project("production")

    client.ensure_application(project.id, "https://app.example.com", name="Intric")

    payload = fake_http.calls_to("POST", f"{PROJECTS}/{project.id}/apps/oidc")[0]["json"]
    assert payload["name"] == "Intric"
    assert payload["redirectUris"] == ["https://app.example.com/login/callback"]
    assert payload["postLogoutRedirectUris"] == ["https://app.example.com/logout"]
    assert payload["grantTypes"] == ["OIDC_GRANT_TYPE_AUTHORIZATION_CODE"]
    assert payload["responseTypes"] == ["OIDC_RESPONSE_TYPE_CODE"]
    assert payload["authMethodType"] == "OIDC_AUTH_METHOD_TYPE_NONE"


def test_existing_app_without_client_id_is_fatal(fake_http) -> None:
    fake_http.add("POST", f"{PROJECTS}/p1/apps/_search",
                  FakeResponse(200, {"result": [{"id": "a1", "name": "Intric"}]}))
    fake_http.add("GET", f"{PROJECTS}/p1/apps/a1", FakeResponse(200, {"app": {"id": "a1"}}))

    with pytest.raises(MissingFieldError, match="client ID"):
        ZitadelClient(ZITADEL, "pat").ensure_application("p1", "https://app.example.com")


def test_create_project_without_id_is_fatal(fake_http) -> None:
    fake_http.add("POST", PROJECTS_SEARCH, FakeResponse(200, {}))
    fake_http.add("POST", PROJECTS, FakeResponse(200, {"details": {}}))

    with pytest.raises(MissingFieldError, match="project ID"):
        ZitadelClient(ZITADEL, "pat").ensure_project("production")


def test_non_2xx_is_fatal_with_status_and_body(fake_http) -> None:
    fake_http.add("POST", PROJECTS_SEARCH, FakeResponse(401, '{"message":"invalid token"}'))

    with pytest.raises(ApiError) as excinfo:
        ZitadelClient(ZITADEL, "bad").verify_token()

    assert excinfo.value.status_code == 401
    assert "HTTP 401" in str(excinfo.value)
    assert "invalid token" in str(excinfo.value)


def test_get_organization_id(fake_http) -> None:
    fake_http.add("GET", f"{ZITADEL}/auth/v1/users/me",
                  FakeResponse(200, {"user": {"details": {"resourceOwner": "org-42"}}}))

    assert ZitadelClient(ZITADEL, "pat").get_organization_id() == "org-42"


def test_get_organization_id_missing_owner(fake_http) -> None:
    fake_http.add("GET", f"{ZITADEL}/auth/v1/users/me", FakeResponse(200, {"user": {}}))

    with pytest.raises(MissingFieldError, match="organization ID"):
        ZitadelClient(ZITADEL, "pat").get_organization_id()
