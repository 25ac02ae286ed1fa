"""Reposync 编排器单元测试

网关为 MagicMock，通过 mock_calls 校验调用顺序。
"""

from __future__ import annotations

from unittest.mock import MagicMock, call

import pytest

from reposync.core.exceptions import ConfigurationError, DeployError, LibraryUpdateError
from reposync.services.reposync import Reposync


def _gateway(has_branch: bool = True) -> MagicMock:
    gw = MagicMock()
    gw.control_repo_has_branch.return_value = has_branch
    return gw


class TestBranch:
    def test_branch_name(self) -> None:
        assert Reposync("refs/heads/dev", gateway=_gateway()).branch == "dev"

    def test_tag_has_no_branch(self) -> None:
        assert Reposync("refs/tags/v1", gateway=_gateway()).branch is None


class TestDeploy:
    @pytest.mark.parametrize("ref", ["refs/tags/v1.0", "HEAD", "refs/heads/"])
    def test_non_branch_is_noop(self, ref: str) -> None:
        gw = _gateway()
        Reposync(ref, gateway=gw).deploy()
        assert gw.mock_calls == []

    def test_master_raises_before_any_call(self) -> None:
        gw = _gateway()
        with pytest.raises(ConfigurationError, match="master"):
            Reposync("refs/heads/master", gateway=gw).deploy()
        assert gw.mock_calls == []

    def test_existing_branch(self) -> None:
        gw = _gateway(has_branch=True)
        Reposync("refs/heads/feature", gateway=gw).deploy()
        assert gw.mock_calls == [
            call.control_repo_has_branch("feature"),
            call.deploy("feature"),
            call.write_new_puppetfile("feature", "feature"),
            call.update_libraries("feature"),
        ]
        gw.remove.assert_not_called()

    def test_production_deploys_only(self) -> None:
        gw = _gateway(has_branch=True)
        Reposync("refs/heads/production", gateway=gw).deploy()
        assert gw.mock_calls == [
            call.control_repo_has_branch("production"),
            call.deploy("production"),
        ]

    def test_absent_branch_removes(self) -> None:
        gw = _gateway(has_branch=False)
        Reposync("refs/heads/old-feature", gateway=gw).deploy()
        assert gw.mock_calls == [
            call.control_repo_has_branch("old-feature"),
            call.remove("old-feature"),
        ]

    def test_deploy_failure_propagates(self) -> None:
        gw = _gateway()
        gw.deploy.side_effect = DeployError("r10k 部署环境失败: feature", "feature")
        with pytest.raises(DeployError):
            Reposync("refs/heads/feature", gateway=gw).deploy()
        gw.update_libraries.assert_not_called()

    def test_library_failure_does_not_undo_deploy(self) -> None:
        gw = _gateway()
        gw.update_libraries.side_effect = LibraryUpdateError("失败: feature", "feature")
        with pytest.raises(LibraryUpdateError):
            Reposync("refs/heads/feature", gateway=gw).deploy()
        gw.deploy.assert_called_once_with("feature")
        gw.remove.assert_not_called()


class TestUpdateLibraries:
    def test_non_branch_is_noop(self) -> None:
        gw = _gateway()
        Reposync("refs/tags/v2", gateway=gw).update_libraries()
        assert gw.mock_calls == []

    def test_absent_branch_is_noop(self) -> None:
        gw = _gateway(has_branch=False)
        Reposync("refs/heads/feature", gateway=gw).update_libraries()
        assert gw.mock_calls == [call.control_repo_has_branch("feature")]

    def test_master_routes_to_production(self) -> None:
        gw = _gateway(has_branch=False)
        Reposync("refs/heads/master", gateway=gw).update_libraries()
        assert gw.mock_calls == [call.update_libraries("production")]

    def test_production(self) -> None:
        gw = _gateway(has_branch=True)
        Reposync("refs/heads/production", gateway=gw).update_libraries()
        assert gw.mock_calls == [
            call.control_repo_has_branch("production"),
            call.deploy("production"),
            call.update_libraries("production"),
        ]

    def test_existing_branch(self) -> None:
        gw = _gateway(has_branch=True)
        Reposync("refs/heads/feature", gateway=gw).update_libraries()
        assert gw.mock_calls == [
            call.control_repo_has_branch("feature"),
            call.deploy("feature"),
            call.write_new_puppetfile("feature", "feature"),
            call.update_libraries("feature"),
        ]


class TestDefaultGateway:
    def test_uses_container_gateway(self, monkeypatch: pytest.MonkeyPatch) -> None:
        import reposync.services.container as container_mod
        fake = MagicMock()
        monkeypatch.setattr(container_mod, "_global", fake)
        assert Reposync("refs/heads/dev")._gateway is fake.gateway
