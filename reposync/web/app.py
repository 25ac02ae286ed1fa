"""webhook 服务（基于 Flask）

开发环境: reposync-web
生产环境: gunicorn --config deploy/gunicorn.conf.py reposync.web.app:app
"""

from __future__ import annotations

import logging

from flask import Flask, Response, jsonify
from werkzeug.exceptions import HTTPException

from reposync.core.exceptions import ReposyncError
from reposync.web.routes import sync_bp

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.register_blueprint(sync_bp)


# =========================================================================
# 全局 JSON 错误处理
# =========================================================================


@app.errorhandler(HTTPException)
def handle_http_exception(exc: HTTPException) -> tuple[Response, int]:
    """将所有 HTTP 异常统一返回 JSON"""
    return jsonify(error=exc.description), exc.code or 500


@app.errorhandler(ReposyncError)
def handle_reposync_error(exc: ReposyncError) -> tuple[Response, int]:
    """同步失败按服务器错误返回，附带错误码"""
    logger.error("同步失败 [%s]: %s", exc.code, exc)
    return jsonify(error=str(exc), code=exc.code), 500


@app.errorhandler(Exception)
def handle_generic_exception(exc: Exception) -> tuple[Response, int]:  # noqa: ARG001
    """捕获未处理异常，返回 500 JSON"""
    logger.exception("未处理的异常")
    return jsonify(error="服务器内部错误"), 500


@app.route("/")
def index() -> Response:
    return jsonify(message="reposync 运行中")


def run_server(host: str = "0.0.0.0", port: int = 8888) -> None:
    """启动开发服务器"""
    logger.info("webhook 服务启动: http://%s:%d", host, port)
    app.run(host=host, port=port)


def main() -> None:
    from reposync.services.container import get_container
    from reposync.utils.logger import setup_logging

    cfg = get_container().config
    setup_logging(level=cfg.log_level, json_output=cfg.log_json)
    run_server(host=cfg.web_host, port=cfg.web_port)
