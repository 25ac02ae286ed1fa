"""推送同步编排器

根据推送的 ref 决定部署、移除或跳过环境，以及是否更新环境模块。

deploy():
  控制仓库有推送的分支 → 部署环境（非 production 时再更新模块）
  控制仓库没有该分支   → 移除环境
update_libraries():
  某个模块仓库有推送 → 重新部署同名环境并更新其模块；master 对应 production 环境
"""

from __future__ import annotations

import logging

from reposync.core.exceptions import ConfigurationError
from reposync.core.protocols import RepositoryGateway
from reposync.core.ref import MASTER, PRODUCTION, BranchRef, parse_ref
from reposync.utils.logger import ref_context

logger = logging.getLogger(__name__)


class Reposync:
    """单个 ref 的同步编排器，失败直接向调用方抛出，不回滚已完成的步骤"""

    def __init__(self, ref: str, gateway: RepositoryGateway | None = None) -> None:
        self.ref = parse_ref(ref)
        if gateway is None:
            from reposync.services.container import get_container
            gateway = get_container().gateway
        self._gateway = gateway

    @property
    def branch(self) -> str | None:
        return self.ref.name if isinstance(self.ref, BranchRef) else None

    def deploy(self) -> None:
        with ref_context(self.ref.ref):
            self._deploy()

    def update_libraries(self) -> None:
        with ref_context(self.ref.ref):
            self._update_libraries_workflow()

    def _deploy(self) -> None:
        branch = self.branch
        if branch is None:
            logger.info("非分支 ref，跳过部署: %s", self.ref.ref)
            return
        if branch == MASTER:
            raise ConfigurationError("不允许存在 master 环境")

        if self._control_repo_has_branch(branch):
            self._gateway.deploy(branch)
            if branch != PRODUCTION:
                self._update_libraries(branch)
        else:
            logger.info("控制仓库没有分支 %s，移除环境", branch)
            self._gateway.remove(branch)

    def _update_libraries_workflow(self) -> None:
        branch = self.branch
        if branch is None:
            logger.info("非分支 ref，跳过模块更新: %s", self.ref.ref)
            return
        if not self._control_repo_has_branch(branch):
            logger.info("控制仓库没有分支 %s，跳过模块更新", branch)
            return

        if branch != MASTER:
            self._gateway.deploy(branch)
        self._update_libraries(branch)

    def _control_repo_has_branch(self, branch: str) -> bool:
        # master 总是对应 production 环境，不需要控制仓库里真有 master
        return branch == MASTER or self._gateway.control_repo_has_branch(branch)

    def _update_libraries(self, branch: str) -> None:
        if branch in (MASTER, PRODUCTION):
            self._gateway.update_libraries(PRODUCTION)
        else:
            self._gateway.write_new_puppetfile(branch, branch)
            self._gateway.update_libraries(branch)
