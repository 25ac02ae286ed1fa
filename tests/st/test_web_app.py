"""Web webhook 端点测试"""

from __future__ import annotations

from unittest.mock import MagicMock, call

import pytest

import reposync.services.container as container_mod
from reposync.core.config import Config
from reposync.core.exceptions import DeployError
from reposync.web.app import app


@pytest.fixture()
def gateway(monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    fake = MagicMock()
    fake.config = Config()
    fake.gateway.control_repo_has_branch.return_value = True
    monkeypatch.setattr(container_mod, "_global", fake)
    return fake.gateway


@pytest.fixture()
def client(gateway):
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c


class TestGlobalErrorHandlers:
    def test_404_returns_json(self, client) -> None:
        resp = client.get("/nonexistent")
        assert resp.status_code == 404
        assert "error" in resp.get_json()

    def test_405_returns_json(self, client) -> None:
        resp = client.post("/deploy/refs/heads/dev")
        assert resp.status_code == 405
        assert "error" in resp.get_json()


class TestIndex:
    def test_liveness(self, client) -> None:
        resp = client.get("/")
        assert resp.status_code == 200
        assert "message" in resp.get_json()


class TestDeploy:
    def test_deploy_branch(self, client, gateway) -> None:
        resp = client.get("/deploy/refs/heads/feature")
        assert resp.status_code == 200
        assert resp.get_json()["ref"] == "refs/heads/feature"
        assert gateway.mock_calls == [
            call.control_repo_has_branch("feature"),
            call.deploy("feature"),
            call.write_new_puppetfile("feature", "feature"),
            call.update_libraries("feature"),
        ]

    def test_deploy_tag_is_noop(self, client, gateway) -> None:
        resp = client.get("/deploy/refs/tags/v1")
        assert resp.status_code == 200
        assert gateway.mock_calls == []

    def test_master_is_server_error(self, client, gateway) -> None:
        resp = client.get("/deploy/refs/heads/master")
        assert resp.status_code == 500
        assert resp.get_json()["code"] == "CONFIGURATION_ERROR"
        assert gateway.mock_calls == []

    def test_tool_failure_is_server_error(self, client, gateway) -> None:
        gateway.deploy.side_effect = DeployError("r10k 部署环境失败: feature", "feature")
        resp = client.get("/deploy/refs/heads/feature")
        assert resp.status_code == 500
        data = resp.get_json()
        assert data["code"] == "DEPLOY_ERROR"
        assert "feature" in data["error"]

    def test_unexpected_error_is_generic_500(self, client, gateway) -> None:
        gateway.deploy.side_effect = RuntimeError("boom")
        resp = client.get("/deploy/refs/heads/feature")
        assert resp.status_code == 500
        assert "error" in resp.get_json()


class TestUpdate:
    def test_update_master(self, client, gateway) -> None:
        resp = client.get("/update/refs/heads/master")
        assert resp.status_code == 200
        assert gateway.mock_calls == [call.update_libraries("production")]

    def test_update_absent_branch(self, client, gateway) -> None:
        gateway.control_repo_has_branch.return_value = False
        resp = client.get("/update/refs/heads/gone")
        assert resp.status_code == 200
        assert gateway.mock_calls == [call.control_repo_has_branch("gone")]


class TestConfigurationFailure:
    def test_malformed_config_is_configuration_error(self, tmp_path, monkeypatch) -> None:
        from reposync.services.container import ServiceContainer
        p = tmp_path / "r10k.yaml"
        p.write_text("sources: [unclosed\n", encoding="utf-8")
        container = ServiceContainer(config=Config(r10k_config=p), executor=MagicMock())
        monkeypatch.setattr(container_mod, "_global", container)
        app.config["TESTING"] = True
        with app.test_client() as c:
            resp = c.get("/deploy/refs/heads/dev")
        assert resp.status_code == 500
        assert resp.get_json()["code"] == "CONFIGURATION_ERROR"
