"""文件读写工具

- read_yaml_mapping: 读取 r10k.yaml 顶层映射
- atomic_write: Puppetfile 原子覆盖，r10k / librarian-puppet 不会读到写了一半的文件
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

# r10k.yaml 正常只有几十行，超过 1MB 必然是指错了文件
MAX_YAML_SIZE = 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """写同目录临时文件后 os.replace，失败时清理临时文件并抛出原异常"""
    fd, tmp = tempfile.mkstemp(
        dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp",
    )
    try:
        # newline="" 按原样写出，不做换行符转换
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def read_yaml_mapping(path: Path) -> dict[str, Any]:
    """读取 YAML 文件的顶层映射

    文件不存在、为空或顶层不是映射时返回空字典，由调用方决定如何报错。

    Raises:
        yaml.YAMLError: 语法错误
        ValueError: 文件超过 MAX_YAML_SIZE
        OSError: 无法读取
    """
    if not path.exists():
        logger.warning("YAML 文件不存在: %s", path)
        return {}

    size = path.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ValueError(f"YAML 文件过大: {path} ({size} 字节)")

    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if not isinstance(data, dict):
        if data is not None:
            logger.warning("%s 顶层不是映射 (%s)", path, type(data).__name__)
        return {}
    return data
