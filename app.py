"""Flask 入口：创建应用、注册插件与路由、挂载 CORS 和统一错误处理。"""

import atexit
import logging
import os

from flask import Flask, request

import models
from app_routes import handle_catalog_error, search_bp
from config import Config
from core.errors import CatalogError
from core.plugin import SoulaPlugin
from core.registry import PluginRegistry
from core.tasks import BackgroundTasks
from models import db

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": (
        "Origin, Content-Type, Content-Length, Accept-Encoding, X-CSRF-Token, Authorization, X-Token"
    ),
}


def create_app(config_object=Config, *, rng=None) -> Flask:
    """创建 Flask 应用

    Args:
        config_object: 配置类（测试用 TestConfig）
        rng: 注入给浏览量增量的随机数发生器（测试可固定种子）
    """
    app = Flask(__name__)
    app.config.from_object(config_object)
    app.json.ensure_ascii = False

    db.init_app(app)

    tasks = BackgroundTasks(app)
    atexit.register(tasks.shutdown, wait=False)

    registry = PluginRegistry()
    plugin = registry.register(SoulaPlugin(app, db, models, tasks=tasks, rng=rng))
    app.extensions["plugin_registry"] = registry
    app.extensions["soula"] = plugin

    # 数据库不可用时也允许启动（便于本地开发），只告警
    try:
        registry.initialize_all()
    except Exception as exc:
        app.logger.warning("Plugin initialization failed: %s", exc)

    @app.before_request
    def cors_preflight():
        if request.method == "OPTIONS":
            return "", 204
        return None

    @app.after_request
    def cors_headers(response):
        response.headers.update(CORS_HEADERS)
        return response

    app.register_error_handler(CatalogError, handle_catalog_error)
    app.register_blueprint(search_bp)
    registry.register_routes(app)

    return app


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    create_app().run(debug=True, host="0.0.0.0", port=int(os.getenv("PORT", "8888")))
