"""集中配置管理

存储根目录、索引文件、注册表与 CDN 地址等统一从此处获取。
支持从 YAML 文件加载 + 编程式覆盖。筛选配置（SelectionConfig）按次传入，不在此持久化。
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

from assetkit.core.exceptions import ConfigError
from assetkit.utils.yaml_io import load_yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "assetkit.yml"


@dataclass
class Config:
    """全局配置"""

    # 存储
    storage_root: str = "inst"
    index_file: str = "inst/.assetkit.yml"

    # 注册表
    registry_api: str = "https://data.jsdelivr.com/v1/package/npm/"
    cdn_root: str = "https://cdn.jsdelivr.net/npm/"
    request_timeout: int = 30  # 秒

    # 下载并发度
    max_workers: int = 4

    # 宿主包名，写入 local 描述符
    package_name: str = ""

    extra: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        for attr in ("registry_api", "cdn_root"):
            value = getattr(self, attr)
            if value and not value.endswith("/"):
                setattr(self, attr, value + "/")
        if self.max_workers < 1:
            raise ConfigError(f"max_workers 必须 >= 1: {self.max_workers}")

    @classmethod
    def from_file(cls, path: str = DEFAULT_CONFIG_FILE) -> Config:
        """从 YAML 文件加载配置，文件不存在时返回默认值"""
        data = load_yaml(path, label="配置文件")
        if not data:
            return cls()
        known = set(cls.__dataclass_fields__) - {"extra"}
        matched = {k: v for k, v in data.items() if k in known}
        extra = {k: v for k, v in data.items() if k not in known}
        try:
            cfg = cls(**matched)
        except TypeError as e:
            raise ConfigError(f"配置文件无效: {path} - {e}") from e
        cfg.extra = extra
        return cfg

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# 全局单例，由 CLI / Web 入口显式初始化
_current: Config | None = None


def get_config() -> Config:
    """获取当前配置（未初始化则返回默认值）"""
    global _current  # noqa: PLW0603
    if _current is None:
        _current = Config()
    return _current


def init_config(path: str = DEFAULT_CONFIG_FILE) -> Config:
    """从文件初始化全局配置"""
    global _current  # noqa: PLW0603
    _current = Config.from_file(path)
    logger.info("配置已加载: %s", path)
    return _current
