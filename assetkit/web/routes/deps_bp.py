"""依赖管理 API Blueprint

职责:
- 已安装依赖查询
- 注册表版本查询
- 安装 / 更新 / 删除

库名可能带作用域（@scope/name），路由使用 path 转换器。
"""

from __future__ import annotations

import logging
import re

from flask import Blueprint, request

from assetkit.core.models import SelectionConfig
from assetkit.services.container import get_container
from assetkit.web.responses import bad_request, ok

logger = logging.getLogger(__name__)

deps_bp = Blueprint("deps", __name__, url_prefix="/api/deps")

# npm 包名: 可选 @scope/，小写字母数字及 . _ -
_NAME_RE = re.compile(r"^(@[a-z0-9][a-z0-9._\-]*/)?[a-z0-9][a-z0-9._\-]*$")
_VERSION_RE = re.compile(r"^[a-zA-Z0-9][a-zA-Z0-9._+\-]*$")


def _valid_name(name: str) -> bool:
    return bool(_NAME_RE.match(name))


@deps_bp.route("")
def list_deps():
    """已安装依赖列表"""
    records = get_container().deps.list_installed()
    return ok({"installed": [{"name": r.name, **r.to_dict()} for r in records]})


@deps_bp.route("", methods=["POST"])
def create_dep():
    """安装依赖

    请求体: {"name": "...", "version": "...", "options": {local, minified, ...}}
    """
    body = request.get_json(silent=True) or {}
    name = str(body.get("name", "")).strip()
    if not _valid_name(name):
        return bad_request(f"库名不合法: {name}")
    version = body.get("version") or None
    if version is not None and not _VERSION_RE.match(str(version)):
        return bad_request(f"版本号不合法: {version}")
    options = body.get("options") or {}
    if not isinstance(options, dict):
        return bad_request("options 必须是对象")

    dep = get_container().deps.create(
        name, version=version, options=SelectionConfig.from_dict(options),
    )
    return ok({"dependency": dep.to_dict()}, 201)


@deps_bp.route("/<path:name>/versions")
def dep_versions(name: str):
    """注册表版本列表"""
    if not _valid_name(name):
        return bad_request(f"库名不合法: {name}")
    info = get_container().registry.version_info(name)
    return ok({
        "name": name,
        "versions": info.versions,
        "latest_stable": info.latest_stable,
    })


@deps_bp.route("/<path:name>/update", methods=["POST"])
def update_dep(name: str):
    """升级或降级，请求体: {"version": "latest" | "x.y.z", "dry_run": false}"""
    if not _valid_name(name):
        return bad_request(f"库名不合法: {name}")
    body = request.get_json(silent=True) or {}
    target = str(body.get("version") or "latest")
    if not _VERSION_RE.match(target):
        return bad_request(f"版本号不合法: {target}")

    dm = get_container().deps
    plan = dm.plan_update(name, target)
    result = {
        "current": plan.current,
        "target": plan.target,
        "latest": plan.latest,
        "direction": plan.direction.value,
    }
    if body.get("dry_run"):
        return ok(result)
    dep = dm.update(name, plan.target)
    result["dependency"] = dep.to_dict()
    return ok(result)


@deps_bp.route("/<path:name>", methods=["GET"])
def get_dep(name: str):
    """单个已安装依赖"""
    if not _valid_name(name):
        return bad_request(f"库名不合法: {name}")
    r = get_container().deps.installed(name)
    return ok({"name": r.name, **r.to_dict()})


@deps_bp.route("/<path:name>", methods=["DELETE"])
def delete_dep(name: str):
    """删除已安装依赖"""
    if not _valid_name(name):
        return bad_request(f"库名不合法: {name}")
    get_container().deps.remove(name)
    logger.info("依赖已通过 API 删除: %s", name)
    return ok({"message": f"已删除 {name}"})
