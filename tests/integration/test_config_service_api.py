"""
Config service API tests.

Each test builds a fresh app (fresh store) with FastAPI TestClient; the
remote existence check is either disabled or replaced with a fake.
"""
import pytest
from starlette.testclient import TestClient

from config_service.config import ConfigServiceConfig
from config_service.main import create_app, get_verifier
from shared.repository import RepositoryNotFound


class FakeVerifier:
    def __init__(self, existing):
        self.existing = set(existing)
        self.calls = []

    async def verify(self, path, branch):
        self.calls.append((path, branch))
        if (path, branch) not in self.existing:
            raise RepositoryNotFound()


@pytest.fixture
def unverified_client():
    return TestClient(create_app(ConfigServiceConfig(verify_repository=False)))


@pytest.fixture
def verifier():
    return FakeVerifier({("octocat/Hello-World", "main"), ("octocat/Hello-World", "master")})


@pytest.fixture
def verified_client(verifier):
    app = create_app(ConfigServiceConfig(verify_repository=True))
    app.dependency_overrides[get_verifier] = lambda: verifier
    return TestClient(app)


class TestDetails:
    """GET /details"""

    def test_empty_before_check_out(self, unverified_client):
        response = unverified_client.get("/details")
        assert response.status_code == 200
        assert response.json() == {"gitRef": "", "branch": ""}

    def test_after_check_out(self, unverified_client):
        unverified_client.post("/check_out_ref", json={"ref": "octocat/Hello-World", "branch": "main"})
        response = unverified_client.get("/details")
        assert response.json() == {
            "gitRef": "https://github.com/octocat/Hello-World.git",
            "branch": "main",
        }


class TestCheckOutRef:
    """POST /check_out_ref"""

    def test_success(self, verified_client, verifier):
        response = verified_client.post("/check_out_ref", json={"ref": "octocat/Hello-World", "branch": "main"})
        assert response.status_code == 200
        assert response.json() == {"message": "success"}
        assert verifier.calls == [("octocat/Hello-World", "main")]

    def test_default_branch(self, verified_client, verifier):
        response = verified_client.post("/check_out_ref", json={"ref": "octocat/Hello-World"})
        assert response.status_code == 200
        assert verifier.calls == [("octocat/Hello-World", "master")]
        assert verified_client.get("/details").json()["branch"] == "master"

    def test_repository_not_found(self, verified_client):
        response = verified_client.post("/check_out_ref", json={"ref": "octocat/Hello-World", "branch": "gone"})
        assert response.status_code == 400
        assert response.json() == {"error": "Repo or branch does not exist"}
        assert verified_client.get("/details").json() == {"gitRef": "", "branch": ""}

    @pytest.mark.parametrize("ref", ["", "octocat", "a/b/c"])
    def test_invalid_ref_skips_verification(self, verified_client, verifier, ref):
        response = verified_client.post("/check_out_ref", json={"ref": ref, "branch": "main"})
        assert response.status_code == 400
        assert response.json() == {"error": "The github ref is invalid"}
        assert verifier.calls == []

    def test_invalid_json(self, unverified_client):
        response = unverified_client.post(
            "/check_out_ref",
            content="{ref: nope",
            headers={"content-type": "application/json"},
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid json"}

    def test_overwrite(self, unverified_client):
        unverified_client.post("/check_out_ref", json={"ref": "octocat/Hello-World", "branch": "main"})
        unverified_client.post("/check_out_ref", json={"ref": "octocat/Spoon-Knife", "branch": "dev"})
        assert unverified_client.get("/details").json() == {
            "gitRef": "https://github.com/octocat/Spoon-Knife.git",
            "branch": "dev",
        }


class TestHealth:
    def test_reports_configured_state(self, unverified_client):
        assert unverified_client.get("/health").json()["configured"] is False
        unverified_client.post("/check_out_ref", json={"ref": "octocat/Hello-World", "branch": "main"})
        assert unverified_client.get("/health").json()["configured"] is True
