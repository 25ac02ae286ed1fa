"""reposync 日志配置

每条日志都带上当前处理的 git ref，便于在 hook / webhook 日志里区分多次推送。
编排器用 ref_context() 设置 ref，RefFilter 把它写入 record.ref。
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone

_current_ref: ContextVar[str] = ContextVar("reposync_ref", default="-")

TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s [%(ref)s]: %(message)s"


@contextmanager
def ref_context(ref: str) -> Iterator[None]:
    token = _current_ref.set(ref)
    try:
        yield
    finally:
        _current_ref.reset(token)


class RefFilter(logging.Filter):
    """给日志记录附加 ref 字段，不过滤任何记录"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.ref = _current_ref.get()
        return True


class JSONFormatter(logging.Formatter):
    """结构化 JSON 日志，字段: timestamp / level / logger / ref / message (/ exception)"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "ref": getattr(record, "ref", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置根日志器：单个 stderr handler，文本或 JSON 格式

    stdout 留给 CLI 输出；重复调用会替换已有 handler。
    """
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(RefFilter())
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)
