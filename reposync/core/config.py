"""集中配置管理

进程启动时由 Config.from_env() 构建一次，之后只读，
通过服务容器显式传递给网关，不在业务代码里临时读取环境变量。
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from reposync.core.exceptions import ConfigurationError
from reposync.utils.file_io import read_yaml_mapping

logger = logging.getLogger(__name__)

DEFAULT_R10K_CONFIG = Path("/etc/puppetlabs/r10k/r10k.yaml")
R10K_CONFIG_ENV = "PUPPET_R10K_CONFIG"


@dataclass(frozen=True)
class Config:
    """全局配置"""

    # r10k 配置覆盖路径，None 表示使用默认路径
    r10k_config: Path | None = None

    # 外部工具
    r10k_bin: str = "r10k"
    librarian_bin: str = "librarian-puppet"
    git_bin: str = "git"

    # 日志
    log_level: str = "INFO"
    log_json: bool = False

    # Web
    web_host: str = "0.0.0.0"
    web_port: int = 8888

    @property
    def r10k_config_path(self) -> Path:
        """实际使用的 r10k 配置文件路径"""
        return self.r10k_config if self.r10k_config is not None else DEFAULT_R10K_CONFIG

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Config:
        """从环境变量构建配置"""
        env = os.environ if environ is None else environ
        cfg = cls(
            r10k_config=r10k_config_override(env.get(R10K_CONFIG_ENV)),
            r10k_bin=env.get("REPOSYNC_R10K_BIN", "r10k"),
            librarian_bin=env.get("REPOSYNC_LIBRARIAN_BIN", "librarian-puppet"),
            git_bin=env.get("REPOSYNC_GIT_BIN", "git"),
            log_level=env.get("REPOSYNC_LOG_LEVEL", "INFO"),
            log_json=env.get("REPOSYNC_LOG_JSON", "") == "1",
            web_host=env.get("REPOSYNC_HOST", "0.0.0.0"),
            web_port=int(env.get("REPOSYNC_PORT", "8888")),
        )
        logger.debug("配置已加载: r10k=%s", cfg.r10k_config_path)
        return cfg


def r10k_config_override(value: str | None) -> Path | None:
    """未设置、为空或等于默认路径时视为无覆盖"""
    if value in (None, "", str(DEFAULT_R10K_CONFIG)):
        return None
    return Path(value)


def _lookup(data: Mapping[str, Any], key: str) -> Any:
    """兼容 Ruby 符号写法的键（`:sources` 与 `sources`）"""
    if f":{key}" in data:
        return data[f":{key}"]
    return data.get(key)


def _is_unprefixed(values: Mapping[str, Any]) -> bool:
    # 只有缺失、null、false 算无前缀；空字符串等同 r10k 的真值前缀
    prefix = _lookup(values, "prefix")
    return prefix is None or prefix is False


def load_main_source(path: Path) -> dict[str, Any]:
    """解析 r10k 配置，返回第一个无前缀的 source

    该 source 必须提供 remote（控制仓库地址）和 basedir（环境根目录）。

    Raises:
        ConfigurationError: 文件缺失、无法读取或语法错误、没有 sources 映射、
            不存在无前缀 source，或该 source 缺少 remote / basedir
    """
    try:
        data = read_yaml_mapping(path)
    except (yaml.YAMLError, ValueError, OSError) as e:
        raise ConfigurationError(f"无法解析 r10k 配置: {path} ({e})") from e

    sources = _lookup(data, "sources")
    if isinstance(sources, Mapping):
        for values in sources.values():
            if isinstance(values, Mapping) and _is_unprefixed(values):
                source = {str(k).lstrip(":"): v for k, v in values.items()}
                missing = [k for k in ("remote", "basedir") if not source.get(k)]
                if missing:
                    raise ConfigurationError(
                        f"r10k 配置的主 source 缺少 {', '.join(missing)}: {path}"
                    )
                return source

    raise ConfigurationError(f"无法解析 r10k 配置: {path}")
