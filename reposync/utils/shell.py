"""Shell 命令执行工具 — 统一子进程调用

通过 CommandExecutor 协议抽象子进程执行，测试时注入假实现即可，无需 patch subprocess。
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


# =========================================================================
# 命令执行结果
# =========================================================================

@dataclass
class CommandResult:
    """命令执行结果（与 subprocess 解耦）"""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0


# =========================================================================
# 命令执行器协议
# =========================================================================

class CommandExecutor(Protocol):
    """命令执行器协议 — 抽象子进程调用

    同步阻塞执行，直到外部工具退出；不设置超时。
    """

    def execute(self, args: list[str], *, cwd: str | None = None) -> CommandResult:
        """执行命令并返回结果"""
        ...


# =========================================================================
# 默认实现: 本地执行器
# =========================================================================

class LocalExecutor:
    """本地子进程执行器（默认实现）

    以参数列表形式调用，不经过 shell，环境名和仓库地址无需再做引号转义。
    """

    def execute(self, args: list[str], *, cwd: str | None = None) -> CommandResult:
        logger.info("执行命令: %s (cwd=%s)", " ".join(args), cwd or ".")
        r = subprocess.run(
            args, capture_output=True, text=True, cwd=cwd, check=False,
        )
        return CommandResult(
            returncode=r.returncode,
            stdout=r.stdout,
            stderr=r.stderr,
        )


_default_executor: CommandExecutor = LocalExecutor()


def get_executor() -> CommandExecutor:
    """获取进程默认命令执行器"""
    return _default_executor
