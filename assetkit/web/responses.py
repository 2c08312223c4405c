"""Web 层统一响应辅助函数"""

from __future__ import annotations

from flask import Response, jsonify

from assetkit.core.exceptions import AssetKitError

# 业务异常 code → HTTP 状态码
STATUS_BY_CODE = {
    "VALIDATION_ERROR": 400,
    "CONFIG_ERROR": 500,
    "LIBRARY_NOT_FOUND": 404,
    "NOT_INSTALLED": 404,
    "UNKNOWN_VERSION": 404,
    "ALREADY_AT_VERSION": 409,
    "NO_ASSETS_MATCHED": 422,
    "REGISTRY_UNAVAILABLE": 502,
    "PARTIAL_DOWNLOAD": 502,
}


def ok(data: dict, status: int = 200) -> tuple[Response, int] | Response:
    """成功响应"""
    if status == 200:
        return jsonify(data)
    return jsonify(data), status


def bad_request(message: str) -> tuple[Response, int]:
    """请求参数错误"""
    return jsonify(error=message), 400


def from_error(exc: AssetKitError) -> tuple[Response, int]:
    """业务异常转 JSON 响应"""
    body: dict = {"error": str(exc), "code": exc.code}
    failed = getattr(exc, "failed", None)
    if failed:
        body["failed"] = failed
    details = getattr(exc, "details", None)
    if details:
        body["details"] = details
    return jsonify(body), STATUS_BY_CODE.get(exc.code, 500)
