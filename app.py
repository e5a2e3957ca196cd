# app.py
import logging

from flask import Flask
from config.settings import get_config
from extensions.database import db, migrate
from extensions.logger import init_logger
from extensions.redis_client import init_redis
from controllers.auth_controller import auth_bp
from controllers.project_controller import project_bp
from controllers.task_controller import task_bp
from utils.datetime_helpers import datetime_to_iso, utcnow
from utils.response import json_response
from utils.exceptions import BizError

logger = logging.getLogger(__name__)


def create_app(config_name="development"):
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    # 初始化扩展
    db.init_app(app)
    migrate.init_app(app, db)
    init_logger(app)
    init_redis(app)
    logger.info("Database URI: %s", app.config["SQLALCHEMY_DATABASE_URI"])

    # 登录 / 注册 / token
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    # 项目增删改查 + 成员
    app.register_blueprint(project_bp)
    # 任务增删改查
    app.register_blueprint(task_bp)

    @app.get("/health")
    def health():
        return json_response(data={"status": "ok", "timestamp": datetime_to_iso(utcnow())})

    # 错误处理
    @app.errorhandler(404)
    def not_found(e):
        return json_response(message="Route not found", code=404)

    @app.errorhandler(405)
    def method_not_allowed(e):
        return json_response(message="Method not allowed", code=405)

    @app.errorhandler(BizError)
    def _biz_err(e: BizError):
        return json_response(code=e.code, message=e.message, data=e.data, errors=e.errors)

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(host="0.0.0.0", port=5000, debug=True)
