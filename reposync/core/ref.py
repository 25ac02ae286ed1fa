"""git ref 分类

post-receive hook / webhook 传入的 ref 只有分支（refs/heads/*）需要处理，
tag 等其他 ref 一律视为非分支。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_HEADS_RE = re.compile(r"refs/heads/(.+)")

MASTER = "master"
PRODUCTION = "production"


@dataclass(frozen=True)
class BranchRef:
    ref: str
    name: str

    @property
    def is_branch(self) -> bool:
        return True


@dataclass(frozen=True)
class NonBranchRef:
    ref: str

    @property
    def is_branch(self) -> bool:
        return False


def parse_ref(ref: str) -> BranchRef | NonBranchRef:
    """整串匹配 refs/heads/<name>，分支名为空时视为非分支"""
    m = _HEADS_RE.fullmatch(ref)
    if m is None:
        return NonBranchRef(ref=ref)
    return BranchRef(ref=ref, name=m.group(1))
