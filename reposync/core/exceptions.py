"""统一异常体系

所有业务异常继承 ReposyncError。
Web 层据此返回 JSON 错误，CLI 层据此输出友好提示并以非零状态退出。
"""

from __future__ import annotations


class ReposyncError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigurationError(ReposyncError):
    """前置条件不满足或 r10k 配置无法解析"""

    code = "CONFIGURATION_ERROR"


class EnvironmentToolError(ReposyncError):
    """外部工具针对某个环境执行失败"""

    def __init__(self, message: str, environment: str) -> None:
        super().__init__(message)
        self.environment = environment


class DeployError(EnvironmentToolError):
    """r10k 部署环境失败"""

    code = "DEPLOY_ERROR"


class RemoveError(EnvironmentToolError):
    """r10k 未移除环境（工具返回成功即视为未移除）"""

    code = "REMOVE_ERROR"


class LibraryUpdateError(EnvironmentToolError):
    """librarian-puppet 更新模块失败"""

    code = "LIBRARY_UPDATE_ERROR"
