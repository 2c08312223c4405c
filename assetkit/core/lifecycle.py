"""依赖生命周期管理

编排一次安装 / 更新:

  注册表（版本、文件树）→ 资源筛选 → 本地存储（可选下载）→ 描述符

状态只有两个: 未安装 / 已安装。同一库名同一时间只允许一个已安装版本。

"latest" 的两种含义:
  - create(): 注册表 tags.latest 稳定版（与注册表自身语义一致）
  - update(): 版本列表第一个，可能是预发布版，主动更新时允许试用新版

本地安装采用 暂存 + 切换: 新版本下载到暂存目录，描述符构建完成后
才删除旧版本并改名，任何一步失败都保留旧版本。

用法:
    from assetkit.services.container import get_container

    dm = get_container().deps
    dep = dm.create("bootstrap")
    dm.create("framework7", options=SelectionConfig(local=False))
    dm.update("bootstrap", "4.6.2")
"""

from __future__ import annotations

import logging
import shutil
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from assetkit.core.descriptor import build_dependency
from assetkit.core.exceptions import (
    AlreadyAtVersionError,
    NoAssetsMatchedError,
    NotInstalledError,
    RegistryUnavailableError,
    UnknownVersionError,
    ValidationError,
)
from assetkit.core.models import (
    Dependency,
    InstalledRecord,
    SelectionConfig,
    SourceMode,
    bare_name,
)
from assetkit.core.registry import RegistryClient
from assetkit.core.selector import select_assets
from assetkit.core.store import LocalStore

logger = logging.getLogger(__name__)


class UpdateDirection(str, Enum):
    UPGRADE = "upgrade"
    DOWNGRADE = "downgrade"


@dataclass
class UpdatePlan:
    """一次更新的决策结果（尚未执行）"""

    name: str
    current: str
    target: str
    latest: str
    direction: UpdateDirection


def classify(current: str, target: str, versions: list[str]) -> UpdateDirection:
    """按版本列表中的位置判断升级还是降级

    列表新到旧，位置越小越新。不在列表中的当前版本视为最旧。
    这是位置比较，不是语义化版本比较，结果取决于注册表自身的排序。
    """
    def rank(v: str) -> int:
        return versions.index(v) if v in versions else len(versions)

    if rank(current) < rank(target):
        return UpdateDirection.DOWNGRADE
    return UpdateDirection.UPGRADE


class DependencyManager:
    """资源依赖统一管理器"""

    def __init__(
        self,
        registry: RegistryClient,
        store: LocalStore,
        package_name: str = "",
    ) -> None:
        self.registry = registry
        self.store = store
        self.package_name = package_name
        self._locks: dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, name: str) -> threading.Lock:
        """同一库的写操作串行，不同库互不影响"""
        with self._locks_guard:
            return self._locks.setdefault(bare_name(name), threading.Lock())

    # ------------------------------------------------------------------
    # 查询
    # ------------------------------------------------------------------

    def installed(self, name: str) -> InstalledRecord:
        record = self.store.find_installed(name)
        if record is None:
            raise NotInstalledError(f"依赖未安装: {name}")
        return record

    def get_installed(self, name: str) -> str:
        """当前已安装版本"""
        return self.installed(name).version

    def list_installed(self) -> list[InstalledRecord]:
        return self.store.list_installed()

    def resolve_version(self, name: str, target: str = "latest") -> str:
        """把 "latest"（版本列表第一个）/ "stable"（tags.latest）/ 具体版本解析为版本号"""
        info = self.registry.version_info(name)
        if target == "latest":
            if not info.newest:
                raise RegistryUnavailableError(f"注册表未返回 {name} 的任何版本")
            return info.newest
        if target == "stable":
            if not info.latest_stable:
                raise RegistryUnavailableError(f"注册表未返回 {name} 的 latest 标记")
            return info.latest_stable
        if target not in info.versions:
            raise UnknownVersionError(f"{name} 不存在版本 {target}")
        return target

    # ------------------------------------------------------------------
    # 安装
    # ------------------------------------------------------------------

    def create(
        self,
        name: str,
        version: str | None = None,
        options: SelectionConfig | None = None,
    ) -> Dependency:
        """安装依赖，version 为空或 "latest" 时取稳定版；已安装的旧版本会被替换"""
        if not name or not name.strip():
            raise ValidationError("缺少库名")
        options = options or SelectionConfig()
        with self._lock_for(name):
            return self._install(name, version, options)

    def _install(
        self, name: str, version: str | None, options: SelectionConfig,
    ) -> Dependency:
        tag = version if version and version != "latest" else self.registry.latest_stable(name)
        tree = self.registry.fetch_file_tree(name, tag)
        if not tree.assets:
            raise NoAssetsMatchedError(f"未找到 {name} 的任何资源")

        scripts = select_assets(tree.assets, "js", tree.nested, options)
        stylesheets = select_assets(tree.assets, "css", tree.nested, options)
        # 注册表/筛选阶段的失败都发生在任何文件改动之前
        dep = build_dependency(
            name, tree.base_url, scripts, stylesheets, options,
            package=self.package_name if options.local else "",
        )

        path: Path | None = None
        if options.local:
            path = self._download_staged(
                name, dep.version, tree.base_url, scripts, stylesheets,
            )
        else:
            self.store.remove_installed(name)

        self.store.record(name, dep, path, options)
        logger.info(
            "依赖就绪: %s@%s (%s, %d 个脚本, %d 个样式表)",
            dep.name, dep.version, dep.source_mode.value,
            len(dep.scripts), len(dep.stylesheets),
        )
        return dep

    def _download_staged(
        self,
        name: str,
        version: str,
        base_url: str,
        scripts: list[str] | None,
        stylesheets: list[str] | None,
    ) -> Path:
        staging = self.store.stage(name, version)
        try:
            for asset_type, paths in (("js", scripts), ("css", stylesheets)):
                # 没有匹配时不建目录
                if paths is None:
                    continue
                self.store.prepare(staging, asset_type)
                self.store.download(staging, [base_url + p for p in paths])
            return self.store.commit(staging, name, version)
        except Exception:
            self.store.discard(staging)
            raise

    def create_custom(
        self,
        name: str,
        version: str,
        scripts: list[str | Path] | None = None,
        stylesheets: list[str | Path] | None = None,
    ) -> Dependency:
        """把宿主项目自己的脚本/样式表包装为一个本地依赖"""
        scripts = [Path(p) for p in scripts or []]
        stylesheets = [Path(p) for p in stylesheets or []]
        if not scripts and not stylesheets:
            raise NoAssetsMatchedError(f"{name}: 未提供任何脚本或样式表")
        missing = [str(p) for p in [*scripts, *stylesheets] if not p.is_file()]
        if missing:
            raise ValidationError("文件不存在", details=missing)

        dep = Dependency(
            name=bare_name(name),
            version=version,
            source_mode=SourceMode.LOCAL,
            scripts=[f"js/{p.name}" for p in scripts],
            stylesheets=[f"css/{p.name}" for p in stylesheets],
            package=self.package_name,
        )
        with self._lock_for(name):
            staging = self.store.stage(name, version)
            try:
                for asset_type, files in (("js", scripts), ("css", stylesheets)):
                    if not files:
                        continue
                    folder = self.store.prepare(staging, asset_type)
                    for f in files:
                        shutil.copy2(f, folder / f.name)
                path = self.store.commit(staging, name, version)
            except Exception:
                self.store.discard(staging)
                raise
            self.store.record(name, dep, path, SelectionConfig())
        logger.info("自定义依赖已创建: %s@%s", dep.name, version)
        return dep

    # ------------------------------------------------------------------
    # 更新 / 删除
    # ------------------------------------------------------------------

    def plan_update(self, name: str, target: str = "latest") -> UpdatePlan:
        """计算更新决策，不做任何改动

        Raises:
            NotInstalledError: 未安装
            AlreadyAtVersionError: 目标版本等于当前版本
            UnknownVersionError: 目标版本不在注册表版本列表中
        """
        current = self.get_installed(name)
        info = self.registry.version_info(name)
        if not info.versions:
            raise RegistryUnavailableError(f"注册表未返回 {name} 的任何版本")

        if target == "latest":
            target = info.newest
        if current == target:
            raise AlreadyAtVersionError(f"{name} 已是版本 {current}")
        if target not in info.versions:
            raise UnknownVersionError(f"{name} 不存在版本 {target}")

        return UpdatePlan(
            name=name,
            current=current,
            target=target,
            latest=info.newest,
            direction=classify(current, target, info.versions),
        )

    def update(
        self,
        name: str,
        target: str = "latest",
        options: SelectionConfig | None = None,
    ) -> Dependency:
        """升级或降级到指定版本，默认沿用安装时的筛选配置"""
        with self._lock_for(name):
            plan = self.plan_update(name, target)
            logger.info(
                "当前版本: %s || 目标版本: %s || 最新版本: %s",
                plan.current, plan.target, plan.latest,
            )
            if plan.direction == UpdateDirection.DOWNGRADE:
                logger.warning("降级 %s 到 %s", name, plan.target)
            else:
                logger.warning("升级 %s 到 %s", name, plan.target)

            if options is None:
                options = SelectionConfig.from_dict(self.installed(name).options)
            return self._install(name, plan.target, options)

    def remove(self, name: str) -> None:
        """删除已安装依赖（文件和索引记录）"""
        with self._lock_for(name):
            if not self.store.remove_installed(name):
                raise NotInstalledError(f"依赖未安装: {name}")
        logger.info("依赖已删除: %s", name)
