"""依赖管理 Web API（基于 Flask）

启动方式: assetkit serve --port 8888
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from assetkit.core.exceptions import AssetKitError
from assetkit.web.responses import from_error
from assetkit.web.routes import deps_bp

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.register_blueprint(deps_bp)


@app.errorhandler(AssetKitError)
def handle_assetkit_error(exc: AssetKitError):
    """业务异常按 code 映射状态码"""
    logger.warning("请求失败: [%s] %s", exc.code, exc)
    return from_error(exc)


@app.errorhandler(HTTPException)
def handle_http_exception(exc):
    """所有 HTTP 异常统一返回 JSON"""
    return jsonify(error=exc.description), exc.code


@app.errorhandler(Exception)
def handle_generic_exception(exc):  # noqa: ARG001
    """未处理异常返回 500 JSON"""
    logger.exception("未处理的异常")
    return jsonify(error="服务器内部错误"), 500
