# extensions/logger.py
"""
日志初始化：
- root logger 挂 console + app.log + error.log（按大小轮转），LOG_JSON 控制 JSON / 文本格式；
- 每条日志带 request_id / user_id，request_id 优先沿用请求头 X-Request-ID；
- 请求前后记录 method、path、状态码与耗时；未处理异常统一记录堆栈并返回 500。
"""
import os, sys, logging, json, uuid, time
from logging.handlers import RotatingFileHandler
from flask import g, has_request_context, request
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

REQUEST_ID_HEADER = "X-Request-ID"
TEXT_FORMAT = "%(asctime)s | %(levelname)s | %(request_id)s | user=%(user_id)s | %(name)s | %(message)s"


class JsonFormatter(logging.Formatter):
    FIELDS = ("request_id", "user_id", "method", "path", "status", "duration_ms")

    def format(self, record):
        data = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key in self.FIELDS:
            value = getattr(record, key, None)
            if value not in (None, "-"):
                data[key] = value
        if record.exc_info:
            data["exc"] = self.formatException(record.exc_info)
        return json.dumps(data, ensure_ascii=False)


class RequestContextFilter(logging.Filter):
    """把当前请求的 request_id 与登录用户 id 注入日志记录。"""

    def filter(self, record):
        record.request_id = "-"
        record.user_id = "-"
        if has_request_context():
            record.request_id = g.get("request_id", "-")
            record.user_id = g.get("current_user_id", "-")
        return True


def current_request_id() -> str:
    if "request_id" not in g:
        g.request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    return g.request_id


def _build_handlers(cfg, level):
    formatter = JsonFormatter() if cfg["LOG_JSON"] else logging.Formatter(TEXT_FORMAT, "%Y-%m-%d %H:%M:%S")
    log_dir = cfg["LOG_DIR"]
    os.makedirs(log_dir, exist_ok=True)

    handlers = [(logging.StreamHandler(sys.stdout), level)]
    for filename, lvl in (("app.log", level), ("error.log", logging.ERROR)):
        rotating = RotatingFileHandler(
            os.path.join(log_dir, filename),
            maxBytes=cfg["LOG_MAX_BYTES"],
            backupCount=cfg["LOG_BACKUP_COUNT"],
            encoding="utf-8",
        )
        handlers.append((rotating, lvl))

    for handler, lvl in handlers:
        handler.setLevel(lvl)
        handler.setFormatter(formatter)
        handler.addFilter(RequestContextFilter())
        yield handler


def _install_handlers(cfg, level):
    root = logging.getLogger()
    # 同一进程内多次 create_app（如测试）只装一次 handler
    if getattr(root, "_taskflow_configured", False):
        return
    root.setLevel(level)
    for handler in _build_handlers(cfg, level):
        root.addHandler(handler)
    root._taskflow_configured = True

    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.INFO)


def init_logger(app):
    cfg = app.config
    level = getattr(logging, cfg["LOG_LEVEL"].upper(), logging.INFO)
    _install_handlers(cfg, level)
    access_log = logging.getLogger("taskflow.access")

    @app.before_request
    def _start_timer():
        # g 属于应用上下文，测试中多个请求可能共享同一个上下文
        g.pop("request_id", None)
        g.pop("current_user_id", None)
        g.request_started = time.time()
        current_request_id()

    @app.after_request
    def _log_response(resp):
        duration = round((time.time() - g.get("request_started", time.time())) * 1000, 1)
        resp.headers[REQUEST_ID_HEADER] = current_request_id()
        access_log.info(
            "%s %s -> %s (%.1fms)", request.method, request.path, resp.status_code, duration,
            extra={"method": request.method, "path": request.path,
                   "status": resp.status_code, "duration_ms": duration},
        )
        return resp

    @app.errorhandler(Exception)
    def _unhandled(e):
        from utils.response import json_response
        if isinstance(e, HTTPException):
            return json_response(code=e.code, message=e.description)
        kind = "Database error" if isinstance(e, SQLAlchemyError) else "Unhandled exception"
        app.logger.exception("%s on %s %s", kind, request.method, request.path)
        msg = f"Internal server error: {e}" if app.debug else "Internal server error"
        return json_response(code=500, message=msg)

    app.logger.info("Logger initialized (level=%s, json=%s)", cfg["LOG_LEVEL"], cfg["LOG_JSON"])
