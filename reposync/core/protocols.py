"""领域协议定义

编排器只依赖 RepositoryGateway 抽象，测试时可直接注入 mock，
不需要真实的 r10k / librarian-puppet / git。
"""

from __future__ import annotations

from typing import Protocol


class RepositoryGateway(Protocol):
    """仓库网关协议 — 环境部署、移除、模块更新和远端分支查询"""

    def deploy(self, environment: str) -> None:
        """部署环境，失败抛 DeployError"""
        ...

    def remove(self, environment: str) -> None:
        """移除环境，未移除时抛 RemoveError"""
        ...

    def update_libraries(self, environment: str) -> None:
        """更新环境的模块依赖，失败抛 LibraryUpdateError"""
        ...

    def control_repo_has_branch(self, branch: str) -> bool:
        """控制仓库是否存在该分支"""
        ...

    def write_new_puppetfile(self, environment: str, branch: str) -> None:
        """把分支固定写回环境的 Puppetfile"""
        ...
