"""同步触发 Blueprint

供 git 服务的 webhook 回调：
- GET /deploy/<ref>   控制仓库有推送
- GET /update/<ref>   模块仓库有推送

ref 含斜杠（refs/heads/x），使用 path 转换器。
"""

from __future__ import annotations

import logging

from flask import Blueprint, Response, jsonify

from reposync.services.container import get_container
from reposync.services.reposync import Reposync

logger = logging.getLogger(__name__)

sync_bp = Blueprint("sync", __name__)


def _sync(ref: str) -> Reposync:
    return Reposync(ref, gateway=get_container().gateway)


@sync_bp.route("/deploy/<path:ref>")
def deploy(ref: str) -> Response:
    logger.info("webhook 触发部署: %s", ref)
    _sync(ref).deploy()
    return jsonify(message="部署完成", ref=ref)


@sync_bp.route("/update/<path:ref>")
def update(ref: str) -> Response:
    logger.info("webhook 触发模块更新: %s", ref)
    _sync(ref).update_libraries()
    return jsonify(message="模块更新完成", ref=ref)
