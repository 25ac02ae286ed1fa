"""Gunicorn 生产配置

用法:
  gunicorn --config deploy/gunicorn.conf.py reposync.web.app:app
"""

import os

# ---------- 网络 ----------
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8888")

# ---------- 并发 ----------
# 同步模型：同一环境的并发推送不做加锁，由 webhook 侧去重
workers = int(os.getenv("GUNICORN_WORKERS", "1"))
worker_class = "sync"
# r10k / librarian-puppet 可能运行数分钟
timeout = int(os.getenv("GUNICORN_TIMEOUT", "900"))

# ---------- 日志 ----------
accesslog = os.getenv("GUNICORN_ACCESS_LOG", "-")
errorlog = os.getenv("GUNICORN_ERROR_LOG", "-")
loglevel = os.getenv("GUNICORN_LOG_LEVEL", "info")

# ---------- 进程管理 ----------
graceful_timeout = 30
keepalive = 5


def post_fork(server, worker):  # noqa: ARG001
    from reposync.services.container import get_container
    from reposync.utils.logger import setup_logging

    cfg = get_container().config
    setup_logging(level=cfg.log_level, json_output=cfg.log_json)
