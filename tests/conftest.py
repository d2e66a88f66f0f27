"""Pytest fixtures shared by the test suite."""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import pytest

from intric_deploy import api_client


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None):
        self.status_code = status_code
        if body is None:
            self.text = ""
        elif isinstance(body, str):
            self.text = body
        else:
            self.text = json.dumps(body)

    def json(self) -> Any:
        return json.loads(self.text)


Handler = Union[FakeResponse, Callable[[Optional[Any]], FakeResponse]]


class FakeHttp:
    """In-memory stand-in for every requests.Session created by the clients.

    Routes are keyed by (method, url). A route holds either a response or a
    callable that receives the JSON payload and returns one.
    """

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], Handler] = {}
        self.calls: List[Dict[str, Any]] = []

    def add(self, method: str, url: str, handler: Handler) -> None:
        self.routes[(method, url)] = handler

    def calls_to(self, method: str, url: str) -> List[Dict[str, Any]]:
        return [c for c in self.calls if c["method"] == method and c["url"] == url]

    def session_factory(self) -> "FakeSession":
        return FakeSession(self)


class FakeSession:
    def __init__(self, http: FakeHttp):
        self.http = http
        self.headers: Dict[str, str] = {}
        self.verify = True

    def request(self, method, url, json=None, params=None, timeout=None):
        self.http.calls.append({
            "method": method,
            "url": url,
            "json": json,
            "params": params,
            "headers": dict(self.headers),
            "verify": self.verify,
            "timeout": timeout,
        })
        handler = self.http.routes.get((method, url))
        if handler is None:
            return FakeResponse(404, {"message": f"no route for {method} {url}"})
        if callable(handler):
            return handler(json)
        return handler


class FakeZitadel:
    """Minimal stateful Zitadel management API served through a FakeHttp."""

    def __init__(self, http: FakeHttp, url: str = "https://login.example.com"):
        self.http = http
        self.projects: List[Dict[str, Any]] = []
        self.apps: Dict[str, List[Dict[str, Any]]] = {}
        self.base = f"{url}/management/v1/projects"
        http.add("POST", f"{self.base}/_search", lambda _: FakeResponse(200, {"result": self.projects}))
        http.add("POST", self.base, self.create_project)

    def create_project(self, body):
        project_id = f"proj-{len(self.projects) + 1}"
        self.projects.append({"id": project_id, "name": body["name"]})
        self.apps[project_id] = []
        apps = f"{self.base}/{project_id}/apps"
        self.http.add("POST", f"{apps}/_search",
                      lambda _: FakeResponse(200, {"result": self.apps[project_id]}))
        self.http.add("POST", f"{apps}/oidc", lambda b: self.create_app(project_id, b))
        return FakeResponse(200, {"id": project_id, "details": {}})

    def create_app(self, project_id, body):
        app_id = f"app-{len(self.apps[project_id]) + 1}"
        client_id = f"client-{app_id}"
        self.apps[project_id].append({"id": app_id, "name": body["name"]})
        self.http.add(
            "GET",
            f"{self.base}/{project_id}/apps/{app_id}",
            FakeResponse(200, {"app": {"id": app_id, "oidcConfig": {"clientId": client_id}}}),
        )
        return FakeResponse(200, {"appId": app_id, "clientId": client_id})


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHttp:
    http = FakeHttp()
    monkeypatch.setattr(api_client.requests, "Session", http.session_factory)
    return http


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("ZITADEL_PAT", "ORGANIZATION_NAME", "USER_EMAIL", "PROJECT_NAME", "GITHUB_TOKEN"):
        monkeypatch.delenv(name, raising=False)


OVERRIDE_YAML = """\
# Intric values override
ingress:
  frontendHost: app.example.com
  backendHost: "api.example.com"
  zitadelHost: login.example.com

zitadel:
  externalDomain: zitadel.example.com

intricBackendApiServer:
  intricSuperApiKey: "super-secret-key"
  zitadelEndpoint: https://zitadel.example.com
  zitadelOpenidConfigEndpoint: https://old.example.com/.well-known/openid-configuration
  zitadelProjectClientId: ""
  zitadelProjectId: ""
  zitadelKeyEndpoint: https://old.example.com/oauth/v2/keys
  zitadelAudience: ""
  zitadelAccessToken: old-token
  replicas: 2  # scaled by hand

frontend:
  zitadelProjectClientId: "untouched"
"""


@pytest.fixture
def override_file(tmp_path):
    path = tmp_path / "values-override.yaml"
    path.write_text(OVERRIDE_YAML, encoding="utf-8")
    return path
