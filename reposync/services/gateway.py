"""仓库网关 — r10k / librarian-puppet / git ls-remote 的无状态封装

职责:
- 解析 r10k 配置，定位控制仓库和环境目录
- 调用 r10k 部署 / 移除环境
- 调用 librarian-puppet 更新环境模块
- 查询远端仓库分支是否存在
- 重写 Puppetfile 固定分支
"""

from __future__ import annotations

import logging
import re
import subprocess
from pathlib import Path
from typing import Any

from reposync.core.config import Config, load_main_source
from reposync.core.exceptions import DeployError, LibraryUpdateError, RemoveError
from reposync.core.puppetfile import pin_branch
from reposync.utils.file_io import atomic_write
from reposync.utils.shell import CommandExecutor, CommandResult, get_executor

logger = logging.getLogger(__name__)

PUPPETFILE = "Puppetfile"


class PuppetGitGateway:
    """仓库网关，配置和命令执行器均显式注入"""

    def __init__(self, config: Config, executor: CommandExecutor | None = None) -> None:
        self.config = config
        self._executor = executor or get_executor()

    # ---- r10k ----

    def r10k_command(self, environment: str) -> list[str]:
        if self.config.r10k_config is None:
            return [self.config.r10k_bin, "deploy", "environment", environment]
        return [
            self.config.r10k_bin, "deploy", "-c", str(self.config.r10k_config),
            "environment", environment,
        ]

    def deploy(self, environment: str) -> None:
        logger.info("部署环境: %s", environment)
        r = self._executor.execute(self.r10k_command(environment))
        if not r.success:
            self._log_failure("r10k deploy", r)
            raise DeployError(f"r10k 部署环境失败: {environment}", environment)

    def remove(self, environment: str) -> None:
        """移除环境

        控制仓库已无此分支时 r10k 清理环境并以非零状态退出；
        返回成功说明环境并未被移除。
        """
        logger.info("移除环境: %s", environment)
        r = self._executor.execute(self.r10k_command(environment))
        if r.success:
            raise RemoveError(f"r10k 未移除环境: {environment}", environment)

    # ---- librarian-puppet ----

    def update_libraries(self, environment: str) -> None:
        cwd = self.environment_path(environment)
        logger.info("更新环境模块: %s (%s)", environment, cwd)
        r = self._executor.execute([self.config.librarian_bin, "update"], cwd=str(cwd))
        if not r.success:
            self._log_failure("librarian-puppet update", r)
            raise LibraryUpdateError(
                f"librarian-puppet 更新模块失败: {environment}", environment,
            )

    # ---- 远端分支查询 ----

    def branch_exists_in_repo(self, branch: str, git_repo: str) -> bool:
        """远端仓库是否有 refs/heads/<branch>；查询失败按不存在处理，不抛异常"""
        try:
            r = self._executor.execute([self.config.git_bin, "ls-remote", "--heads", git_repo])
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("git ls-remote 无法执行: %s (%s)", git_repo, e)
            return False
        if not r.success:
            self._log_failure(f"git ls-remote {git_repo}", r)
        pattern = re.compile(rf"\srefs/heads/{re.escape(branch)}$", re.MULTILINE)
        return pattern.search(r.stdout) is not None

    def control_repo_has_branch(self, branch: str) -> bool:
        return self.branch_exists_in_repo(branch, self.control_repo())

    # ---- Puppetfile ----

    def puppetfile_path(self, environment: str) -> Path:
        return self.environment_path(environment) / PUPPETFILE

    def read_puppetfile(self, environment: str) -> str:
        return self.puppetfile_path(environment).read_text(encoding="utf-8")

    def generate_new_puppetfile(self, environment: str, branch: str) -> str:
        return pin_branch(self.read_puppetfile(environment), branch, self.branch_exists_in_repo)

    def write_new_puppetfile(self, environment: str, branch: str) -> None:
        path = self.puppetfile_path(environment)
        atomic_write(path, self.generate_new_puppetfile(environment, branch))
        logger.info("Puppetfile 已固定分支 %s: %s", branch, path)

    # ---- 配置解析 ----

    def main_source(self) -> dict[str, Any]:
        return load_main_source(self.config.r10k_config_path)

    def control_repo(self) -> str:
        return str(self.main_source()["remote"])

    def environments_dir(self) -> Path:
        return Path(self.main_source()["basedir"])

    def environment_path(self, environment: str) -> Path:
        return self.environments_dir() / environment.replace("-", "_")

    @staticmethod
    def _log_failure(label: str, r: CommandResult) -> None:
        logger.warning("%s 失败 (rc=%d): %s", label, r.returncode, r.stderr[:500])
