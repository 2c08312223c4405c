"""YAML 文件读写

配置文件（assetkit.yml）和安装索引（inst/.assetkit.yml）共用这里的读写逻辑。
调用方传入 label 标明文件用途，出错时提示里带上它，便于判断是哪一个文件坏了。
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import yaml

from assetkit.core.exceptions import ConfigError

logger = logging.getLogger(__name__)

# 安装索引每个库只有几行，超过 10MB 视为损坏
MAX_YAML_SIZE = 10 * 1024 * 1024


def atomic_write(path: Path, content: str) -> None:
    """写同目录临时文件后 os.replace，索引不会出现写了一半的状态"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        Path(tmp).unlink(missing_ok=True)
        raise


def load_yaml(path: str | Path, label: str = "YAML 文件") -> dict[str, Any]:
    """读取顶层为字典的 YAML

    文件不存在或为空返回 {}；顶层不是字典时记一条警告并按空处理。

    Raises:
        ConfigError: 文件过大或格式错误
    """
    p = Path(path)
    if not p.exists():
        return {}

    size = p.stat().st_size
    if size > MAX_YAML_SIZE:
        raise ConfigError(f"{label}过大: {p} ({size} 字节)")

    try:
        with open(p, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error("%s解析失败: %s", label, p)
        raise ConfigError(f"{label}格式错误: {p} - {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("%s顶层不是字典 (%s)，按空处理: %s", label, type(data).__name__, p)
        return {}
    return data


def dump_yaml(data: Any) -> str:
    """序列化为 YAML 文本，保持键顺序（描述符字段顺序对阅读有意义）"""
    return yaml.safe_dump(
        data, default_flow_style=False, allow_unicode=True, sort_keys=False,
    )


def save_yaml(path: str | Path, data: Any, label: str = "YAML 文件") -> None:
    p = Path(path)
    try:
        atomic_write(p, dump_yaml(data))
    except OSError:
        logger.error("%s写入失败: %s", label, p)
        raise
