"""Unit tests for the BoardKit HTTP routes."""

from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from boardkit.api import create_app
from boardkit.api.dependencies import get_graph_client, get_rest_client, get_token
from boardkit.config import Settings
from boardkit.github import GitHubAuthError, GitHubError, RateLimitError, Repository
from boardkit.templates import TemplateCatalog


@pytest.fixture
def app(github) -> FastAPI:
    """Create the app with GitHub access replaced by the in-memory fake."""
    app = create_app(
        settings=Settings(github_token="test-token", throttle_seconds=0.0),
        catalog=TemplateCatalog.load(),
    )

    def override_client():
        yield github

    app.dependency_overrides[get_rest_client] = override_client
    app.dependency_overrides[get_graph_client] = override_client
    return app


@pytest.fixture
def client(app: FastAPI):
    """Create a test client."""
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


def _use_rest(app: FastAPI, rest: MagicMock) -> None:
    app.dependency_overrides[get_rest_client] = lambda: rest


@pytest.mark.unit
class TestTemplateRoutes:
    """Tests for GET /templates and /board-presets."""

    def test_list_templates(self, client: TestClient) -> None:
        response = client.get("/api/v1/templates")

        assert response.status_code == 200
        data = response.json()
        assert data["error"] is None
        ids = [t["id"] for t in data["data"]]
        assert ids == [
            "api-development",
            "bug-tracking",
            "military-rideshare",
            "mobile-app-launch",
            "saas-mvp",
        ]
        assert data["data"][1]["issue_count"] == 6
        assert data["data"][1]["phase_names"] == ["Triage", "Fix", "Verify"]

    def test_filter_by_category(self, client: TestClient) -> None:
        response = client.get("/api/v1/templates", params={"category": "Development"})

        assert [t["id"] for t in response.json()["data"]] == ["api-development"]

    def test_categories(self, client: TestClient) -> None:
        response = client.get("/api/v1/templates/categories")

        assert sorted(response.json()["data"]) == [
            "Development",
            "Maintenance",
            "Mobile",
            "Startup",
            "Transportation",
        ]

    def test_get_template(self, client: TestClient) -> None:
        response = client.get("/api/v1/templates/bug-tracking")

        assert response.status_code == 200
        template = response.json()["data"]
        assert template["labels"][0] == {
            "name": "bug",
            "color": "d73a4a",
            "description": "Something isn't working",
        }
        assert template["phases"][0]["issues"][0]["title"] == "Set up bug report issue template"

    def test_get_unknown_template(self, client: TestClient) -> None:
        response = client.get("/api/v1/templates/nope")

        assert response.status_code == 404
        assert response.json() == {"data": None, "error": "Template not found"}

    def test_board_presets(self, client: TestClient) -> None:
        response = client.get("/api/v1/board-presets")

        presets = {p["board_type"]: p for p in response.json()["data"]}
        assert set(presets) == {"kanban", "scrum", "custom", "none"}
        assert [c["name"] for c in presets["kanban"]["columns"]] == ["Todo", "In Progress", "Done"]
        assert presets["none"]["columns"] == []


@pytest.mark.unit
class TestGenerateRoute:
    """Tests for POST /generate."""

    def test_generate_from_catalog_with_preset_board(self, client: TestClient, github) -> None:
        response = client.post(
            "/api/v1/generate",
            json={
                "owner": "octo",
                "repo": "app",
                "template_id": "bug-tracking",
                "board_config": {"enabled": True, "board_type": "kanban"},
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["issues_created"] == 6
        assert data["issues_skipped"] == 0
        assert data["labels_created"] == 5
        assert data["project_url"] == "https://github.com/users/octo/projects/1"
        assert data["repository_url"] == "https://github.com/octo/app"
        assert data["issues_url"] == "https://github.com/octo/app/issues"
        assert data["failures"] == []
        created = github.calls_to("create_project")[0]
        assert created[2] == "Bug Tracking Workflow Board"

    def test_generate_inline_template_without_board(self, client: TestClient, github) -> None:
        github.add_issue("A")

        response = client.post(
            "/api/v1/generate",
            json={
                "owner": "octo",
                "repo": "app",
                "template": {
                    "id": "inline",
                    "name": "Inline",
                    "labels": [
                        {"name": "bug", "color": "FF0000"},
                        {"name": "feature", "color": "00FF00"},
                    ],
                    "phases": [{"name": "P1", "issues": [{"title": "A"}, {"title": "B"}]}],
                },
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["labels_created"] == 2
        assert data["issues_created"] == 1
        assert data["issues_skipped"] == 1
        assert data["project_url"] is None
        assert github.calls_to("create_project") == []

    @pytest.mark.parametrize(
        "body",
        [
            {"owner": "octo", "repo": "app"},
            {
                "owner": "octo",
                "repo": "app",
                "template_id": "bug-tracking",
                "template": {"id": "x", "name": "X"},
            },
            {"owner": "octo/evil", "repo": "app", "template_id": "bug-tracking"},
            {
                "owner": "octo",
                "repo": "app",
                "template_id": "bug-tracking",
                "board_config": {"enabled": True, "columns": [{"name": "A"}, {"name": "A"}]},
            },
        ],
    )
    def test_invalid_requests(self, client: TestClient, github, body: dict) -> None:
        response = client.post("/api/v1/generate", json=body)

        assert response.status_code == 422
        assert github.calls == []

    def test_unknown_template_id(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/generate",
            json={"owner": "octo", "repo": "app", "template_id": "nope"},
        )

        assert response.status_code == 404

    def test_inaccessible_repository(self, client: TestClient, github) -> None:
        github.accessible = False

        response = client.post(
            "/api/v1/generate",
            json={"owner": "octo", "repo": "hidden", "template_id": "bug-tracking"},
        )

        assert response.status_code == 403
        assert response.json()["error"] == "No access to repository or repository not found"
        assert github.calls_to("list_labels") == []

    def test_board_failure_still_succeeds(self, client: TestClient, github) -> None:
        github.fail_create_project = True

        response = client.post(
            "/api/v1/generate",
            json={
                "owner": "octo",
                "repo": "app",
                "template_id": "bug-tracking",
                "board_config": {"enabled": True, "board_type": "scrum"},
            },
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["project_url"] is None
        assert data["issues_created"] == 6
        assert data["failures"][-1].startswith("board: ")


@pytest.mark.unit
class TestRepoRoutes:
    """Tests for GET /repos and /scopes."""

    def test_list_repos(self, app: FastAPI, client: TestClient) -> None:
        rest = MagicMock()
        rest.list_user_repos.return_value = [
            Repository(
                id=1,
                name="app",
                full_name="octo/app",
                owner="octo",
                private=False,
                html_url="https://github.com/octo/app",
            )
        ]
        _use_rest(app, rest)

        response = client.get("/api/v1/repos")

        assert response.status_code == 200
        assert response.json()["data"][0]["full_name"] == "octo/app"

    @pytest.mark.parametrize(
        ("scopes", "expected"),
        [(["repo", "project"], True), (["repo", "read:project"], False), ([], False)],
    )
    def test_scopes(
        self, app: FastAPI, client: TestClient, scopes: list[str], expected: bool
    ) -> None:
        rest = MagicMock()
        rest.get_token_scopes.return_value = scopes
        _use_rest(app, rest)

        response = client.get("/api/v1/scopes")

        assert response.json()["data"] == {"scopes": scopes, "has_project_scope": expected}

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (GitHubAuthError("bad token"), 401),
            (RateLimitError("slow down"), 429),
            (GitHubError("upstream 500"), 502),
        ],
    )
    def test_github_errors_map_to_status(
        self, app: FastAPI, client: TestClient, error: Exception, status_code: int
    ) -> None:
        rest = MagicMock()
        rest.list_user_repos.side_effect = error
        _use_rest(app, rest)

        response = client.get("/api/v1/repos")

        assert response.status_code == status_code
        assert response.json()["data"] is None


@pytest.mark.unit
class TestAuthentication:
    """Tests for token resolution."""

    def test_bearer_header_wins(self) -> None:
        settings = Settings(github_token="configured")
        assert get_token(settings, "Bearer from-header") == "from-header"

    def test_falls_back_to_configured_token(self) -> None:
        settings = Settings(github_token="configured")
        assert get_token(settings, None) == "configured"
        assert get_token(settings, "Basic abc") == "configured"

    def test_no_token_is_unauthorized(self) -> None:
        with pytest.raises(GitHubAuthError):
            get_token(Settings(github_token=""), None)

    def test_missing_token_returns_401(self) -> None:
        app = create_app(settings=Settings(github_token=""), catalog=TemplateCatalog())
        with TestClient(app, raise_server_exceptions=False) as client:
            response = client.get("/api/v1/repos")

        assert response.status_code == 401
        assert response.json() == {"data": None, "error": "Authentication required"}
