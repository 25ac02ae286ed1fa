"""服务容器 — 进程级配置与网关的唯一构造入口

CLI 和 Web 层通过 get_container() 获取网关，而非各自构造。

用法:
    container = ServiceContainer()
    gateway = container.gateway          # 懒加载

    # 显式注入配置 / 执行器（测试）
    container = ServiceContainer(config=Config(), executor=fake)
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from reposync.core.config import Config
    from reposync.services.gateway import PuppetGitGateway
    from reposync.utils.shell import CommandExecutor

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(
        self,
        config: Config | None = None,
        executor: CommandExecutor | None = None,
    ) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from reposync.core.config import Config
            config = Config.from_env()
        self._config = config
        self._executor = executor

    @property
    def config(self) -> Config:
        return self._config

    @property
    def gateway(self) -> PuppetGitGateway:
        if "gateway" not in self._instances:
            from reposync.services.gateway import PuppetGitGateway
            self._instances["gateway"] = PuppetGitGateway(
                self._config, executor=self._executor,
            )
        return self._instances["gateway"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（仅用于测试）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
