"""Web 路由模块

sync_bp 提供 webhook 回调端点。
"""

from reposync.web.routes.sync_bp import sync_bp

__all__ = ["sync_bp"]
