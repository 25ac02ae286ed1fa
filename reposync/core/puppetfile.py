"""Puppetfile 分支固定

对以 `:git => '<url>'` 结尾的模块声明，若该仓库存在同名分支，
在行尾追加 `, :branch => '<branch>'`。只追加，不删除、不重排任何行。

已追加过 :branch 的行不再以 git 子句结尾，重复执行不会叠加。
"""

from __future__ import annotations

import re
from collections.abc import Callable

GIT_SOURCE_RE = re.compile(r":git *=> *'([^']*)' *$", re.MULTILINE)

BranchPredicate = Callable[[str, str], bool]


def pin_branch(text: str, branch: str, has_branch: BranchPredicate) -> str:
    """返回固定分支后的 Puppetfile 全文

    参数:
        text: 原 Puppetfile 内容
        branch: 要固定的分支名
        has_branch: (branch, git_url) -> 远端仓库是否存在该分支
    """

    def _replace(m: re.Match[str]) -> str:
        if has_branch(branch, m.group(1)):
            return f"{m.group(0)}, :branch => '{branch}'"
        return m.group(0)

    return GIT_SOURCE_RE.sub(_replace, text)
