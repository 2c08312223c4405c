"""注册表文件树解析

不同库发布的目录结构不一致，常见三种:
  - dist/ 下再分 js/ css/（如 bootstrap），或 dist/ 下直接平铺文件
  - 顶层直接有 js/ css/ 目录
  - 所有文件平铺在顶层

在客户端边界一次性识别形态并转换为 FileTree，下游只处理统一表示。
"""

from __future__ import annotations

import logging
from typing import Any

from assetkit.core.exceptions import RegistryUnavailableError
from assetkit.core.models import ASSET_TYPES, AssetEntry, FileTree, TreeShape

logger = logging.getLogger(__name__)


def _is_dir(entry: dict[str, Any]) -> bool:
    return entry.get("type") == "directory" or isinstance(entry.get("files"), list)


def _leaf(entry: dict[str, Any]) -> AssetEntry:
    return AssetEntry(name=str(entry["name"]), hash=str(entry.get("hash") or ""))


def _leaves(entries: list[dict[str, Any]]) -> list[AssetEntry]:
    return [_leaf(e) for e in entries if not _is_dir(e)]


def _by_name(entries: list[dict[str, Any]]) -> dict[str, dict[str, Any]]:
    return {str(e.get("name")): e for e in entries}


def _typed_children(
    entries: list[dict[str, Any]],
) -> tuple[list[AssetEntry], bool]:
    """展开 js/ css/ 子项，返回 (资源列表, 是否为子目录)

    子项为目录时只取其直接包含的文件，更深层目录忽略
    （路径前缀只能补回一级 {type}/）。
    """
    children = [e for e in entries if e.get("name") in ASSET_TYPES]
    nested = any(_is_dir(c) for c in children)
    assets: list[AssetEntry] = []
    for child in children:
        if _is_dir(child):
            assets.extend(_leaves(child["files"]))
        else:
            assets.append(_leaf(child))
    return assets, nested


def detect_shape(files: list[dict[str, Any]]) -> TreeShape:
    """识别顶层目录结构"""
    named = _by_name(files)
    if "dist" in named and _is_dir(named["dist"]):
        return TreeShape.DIST
    if any(t in named and _is_dir(named[t]) for t in ASSET_TYPES):
        return TreeShape.TYPED
    return TreeShape.FLAT


def parse_file_tree(files: Any, base_url: str) -> FileTree:
    """将注册表返回的 files 列表转换为 FileTree

    参数:
        files: 注册表 JSON 的 files 字段（嵌套的目录/文件列表）
        base_url: {cdnRoot}{name}@{version}/

    Raises:
        RegistryUnavailableError: files 不是列表或条目缺少 name
    """
    if not isinstance(files, list) or not all(
        isinstance(e, dict) and "name" in e for e in files
    ):
        raise RegistryUnavailableError("注册表返回的文件树格式无法解析")

    shape = detect_shape(files)
    if shape == TreeShape.DIST:
        dist_files = _by_name(files)["dist"]["files"]
        base_url = f"{base_url}dist/"
        if any(t in _by_name(dist_files) for t in ASSET_TYPES):
            assets, nested = _typed_children(dist_files)
        else:
            assets, nested = _leaves(dist_files), False
    elif shape == TreeShape.TYPED:
        assets, _ = _typed_children(files)
        nested = True
    else:
        assets, nested = _leaves(files), False

    logger.debug(
        "文件树形态: %s, %d 个文件, nested=%s", shape.value, len(assets), nested,
    )
    return FileTree(base_url=base_url, assets=assets, nested=nested, shape=shape)
