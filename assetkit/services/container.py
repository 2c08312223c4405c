"""服务容器: 统一构造注册表客户端、存储与依赖管理器

CLI 和 Web 层均通过 get_container() 获取实例，同一容器内共享状态。

依赖关系（→ 表示依赖）:
  deps  → registry, store
  store → index

用法:
    container = ServiceContainer()
    dm = container.deps            # 懒加载

    cfg = Config.from_file("assetkit.yml")
    container = ServiceContainer(config=cfg)
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from assetkit.core.config import Config
    from assetkit.core.index import InstalledIndex
    from assetkit.core.lifecycle import DependencyManager
    from assetkit.core.registry import RegistryClient
    from assetkit.core.store import LocalStore

logger = logging.getLogger(__name__)


class ServiceContainer:
    """懒加载服务容器"""

    def __init__(self, config: Config | None = None) -> None:
        self._instances: dict[str, object] = {}
        if config is None:
            from assetkit.core.config import get_config
            config = get_config()
        self._config = config

    @property
    def config(self) -> Config:
        return self._config

    @property
    def registry(self) -> RegistryClient:
        if "registry" not in self._instances:
            from assetkit.core.registry import RegistryClient
            self._instances["registry"] = RegistryClient(
                api_root=self._config.registry_api,
                cdn_root=self._config.cdn_root,
                timeout=self._config.request_timeout,
            )
        return self._instances["registry"]  # type: ignore[return-value]

    @property
    def index(self) -> InstalledIndex:
        if "index" not in self._instances:
            from assetkit.core.index import InstalledIndex
            self._instances["index"] = InstalledIndex(self._config.index_file)
        return self._instances["index"]  # type: ignore[return-value]

    @property
    def store(self) -> LocalStore:
        if "store" not in self._instances:
            from assetkit.core.store import LocalStore
            self._instances["store"] = LocalStore(
                root=self._config.storage_root,
                index=self.index,
                max_workers=self._config.max_workers,
            )
        return self._instances["store"]  # type: ignore[return-value]

    @property
    def deps(self) -> DependencyManager:
        if "deps" not in self._instances:
            from assetkit.core.lifecycle import DependencyManager
            self._instances["deps"] = DependencyManager(
                registry=self.registry,
                store=self.store,
                package_name=self._config.package_name,
            )
        return self._instances["deps"]  # type: ignore[return-value]


# ---- 全局单例 ----

_global: ServiceContainer | None = None
_global_lock = threading.Lock()


def get_container() -> ServiceContainer:
    """获取全局 ServiceContainer 单例（线程安全）"""
    global _global  # noqa: PLW0603
    if _global is not None:
        return _global
    with _global_lock:
        if _global is None:
            _global = ServiceContainer()
        return _global


def reset_container() -> None:
    """重置全局容器（配置变更后或测试中使用）"""
    global _global  # noqa: PLW0603
    with _global_lock:
        _global = None
