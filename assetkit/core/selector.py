"""资源筛选

按 SelectionConfig 从文件树中挑出指定类型（js / css）的文件。
筛选规则是一组按固定顺序拼接的前瞻断言，对文件名做子串存在/不存在判断:

  1. 排除含 "map" 的文件（sourcemap 始终排除）
  2. lite   开启则必须含 "lite"，否则不得含
  3. bundle 开启则必须含 "bundle"，否则不得含
  4. rtl    开启则必须含 "rtl"，否则不得含
  5. minified 开启则必须含 "min"，否则不得含
  6. 必须含类型标记（"js" / "css"）
"""

from __future__ import annotations

import logging
import re
from typing import Iterable

from assetkit.core.models import ASSET_TYPES, AssetEntry, SelectionConfig

logger = logging.getLogger(__name__)

MAP_MARKER = "map"
# (配置字段, 文件名标记)，顺序即拼接顺序
FLAG_MARKERS = (
    ("lite", "lite"),
    ("bundle", "bundle"),
    ("rtl", "rtl"),
    ("minified", "min"),
)


def compile_filter(asset_type: str, config: SelectionConfig) -> re.Pattern[str]:
    """把配置编译成一条正则"""
    parts = [f"^(?!.*{MAP_MARKER})"]
    for attr, marker in FLAG_MARKERS:
        op = "=" if getattr(config, attr) else "!"
        parts.append(f"(?{op}.*{re.escape(marker)})")
    parts.append(f"(?=.*{re.escape(asset_type)})")
    return re.compile("".join(parts))


def select_assets(
    assets: Iterable[AssetEntry | str],
    asset_type: str,
    nested: bool,
    config: SelectionConfig,
) -> list[str] | None:
    """筛选指定类型的资源路径

    返回 None 而非空列表表示没有任何匹配，调用方据此跳过建目录和下载。
    nested 为 True 时结果补回 {type}/ 前缀（匹配只针对文件名本身）。
    """
    if asset_type not in ASSET_TYPES:
        raise ValueError(f"不支持的资源类型: {asset_type}")

    pattern = compile_filter(asset_type, config)
    names = [a.name if isinstance(a, AssetEntry) else a for a in assets]
    selected = [n for n in names if pattern.search(n)]

    if not selected:
        logger.info("没有匹配的 %s 资源", asset_type)
        return None
    if nested:
        return [f"{asset_type}/{n}" for n in selected]
    return selected
