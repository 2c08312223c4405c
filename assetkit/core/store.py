"""本地存储

职责:
- 查找某个库当前已安装的版本（索引优先，目录扫描兜底）
- 删除旧版本的存储单元
- 为新版本创建 js/ css/ 目录并下载资源
- 暂存 + 切换: 新版本先装到临时目录，描述符构建完成后再替换旧版本

所有写操作只发生在 root 之下。
"""

from __future__ import annotations

import logging
import re
import shutil
import urllib.error
import urllib.request
import uuid
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable

from assetkit.core.exceptions import PartialDownloadError, ValidationError
from assetkit.core.index import InstalledIndex
from assetkit.core.models import (
    ASSET_TYPES,
    Dependency,
    InstalledRecord,
    SelectionConfig,
    SourceMode,
    bare_name,
    unit_name,
)
from assetkit.utils.net import url_basename, url_extension, validate_url_scheme

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".staging-"

# 下载策略：把 url 的内容写到 dest
Downloader = Callable[[str, Path], None]

# 旧式目录名中的版本部分必须以数字或 v 开头，避免 "alpha" 误匹配 "alpha-plugin-1.0"
_VERSION_HEAD_RE = re.compile(r"^v?\d")


def urlretrieve_downloader(url: str, dest: Path) -> None:
    """默认下载实现（urllib）"""
    validate_url_scheme(url, context="asset download")
    try:
        urllib.request.urlretrieve(url, str(dest))  # nosec B310
    except (urllib.error.HTTPError, urllib.error.URLError, OSError) as e:
        raise ConnectionError(f"下载失败: {url} - {e}") from e


class LocalStore:
    """依赖存储根目录管理"""

    def __init__(
        self,
        root: str | Path,
        index: InstalledIndex,
        downloader: Downloader | None = None,
        max_workers: int = 4,
    ) -> None:
        self.root = Path(root)
        self.index = index
        self._downloader = downloader or urlretrieve_downloader
        self.max_workers = max(1, max_workers)

    def unit_path(self, name: str, version: str) -> Path:
        return self.root / unit_name(name, version)

    # ------------------------------------------------------------------
    # 已安装状态
    # ------------------------------------------------------------------

    def find_installed(self, name: str) -> InstalledRecord | None:
        """返回已安装记录，不存在时返回 None"""
        record = self.index.get(name)
        if record is not None:
            return record
        return self._scan_legacy(name)

    def _claimed_units(self, name: str) -> dict[str, str]:
        """其他库在索引中占用的存储单元: 目录名 -> 库名"""
        return {
            Path(r.path).name: r.name
            for r in self.index.records() if r.path and r.name != name
        }

    def _legacy_units(self, name: str) -> list[Path]:
        """root 下属于 name 的 {name}-{version} 目录（无索引的旧安装）

        "@a/x" 与 "x" 的目录名相同，已被其他库索引占用的目录不算在内。
        """
        if not self.root.is_dir():
            return []
        prefix = f"{bare_name(name)}-"
        claimed = self._claimed_units(name)
        return [
            d for d in self.root.iterdir()
            if d.is_dir()
            and d.name.startswith(prefix)
            and _VERSION_HEAD_RE.match(d.name[len(prefix):])
            and d.name not in claimed
        ]

    def _scan_legacy(self, name: str) -> InstalledRecord | None:
        candidates = self._legacy_units(name)
        if not candidates:
            return None
        if len(candidates) > 1:
            logger.warning(
                "%s 存在多个安装目录: %s，取最新修改的一个",
                name, ", ".join(sorted(d.name for d in candidates)),
            )
        unit = max(candidates, key=lambda d: d.stat().st_mtime)
        return InstalledRecord(
            name=name,
            version=unit.name[len(bare_name(name)) + 1:],
            source_mode=SourceMode.LOCAL,
            path=str(unit),
        )

    def list_installed(self) -> list[InstalledRecord]:
        return self.index.records()

    def record(
        self, name: str, dep: Dependency, path: Path | None,
        options: SelectionConfig,
    ) -> InstalledRecord:
        return self.index.put(InstalledRecord.from_dependency(
            name, dep, str(path) if path else "", options,
        ))

    def remove_installed(self, name: str) -> bool:
        """删除 name 的全部存储单元和索引记录，未安装时什么也不做

        索引记录之外残留的旧式目录一并删除，保证同一库只留一个版本。
        """
        units: list[Path] = []
        record = self.index.get(name)
        if record is not None and record.path:
            units.append(Path(record.path))
        units.extend(u for u in self._legacy_units(name) if u not in units)

        for unit in units:
            if unit.exists():
                shutil.rmtree(unit)
                logger.info("已删除旧版本: %s", unit)
        removed = self.index.remove(name)
        return removed or bool(units)

    # ------------------------------------------------------------------
    # 目录与下载
    # ------------------------------------------------------------------

    def prepare(self, path: Path, asset_type: str) -> Path:
        """创建 path/{asset_type}/，已存在时无操作"""
        if asset_type not in ASSET_TYPES:
            raise ValidationError(f"不支持的资源类型: {asset_type}")
        target = Path(path) / asset_type
        target.mkdir(parents=True, exist_ok=True)
        return target

    def download(self, path: Path, urls: list[str]) -> list[Path]:
        """下载一批资源到 path/{扩展名}/{文件名}

        各文件独立下载，可并发；返回路径按输入顺序排列。
        任一失败抛 PartialDownloadError，已成功的文件保留。
        """
        if not urls:
            return []

        extension = url_extension(urls[0])
        if not extension:
            logger.error("无法解析文件扩展名，跳过下载: %s", urls[0])
            raise PartialDownloadError(
                "无法解析资源文件扩展名，未下载任何文件",
                failed={u: "无扩展名" for u in urls},
            )

        dest_dir = Path(path) / extension
        dest_dir.mkdir(parents=True, exist_ok=True)
        targets = [dest_dir / url_basename(u) for u in urls]

        workers = min(self.max_workers, len(urls))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            outcomes = list(pool.map(self._download_one, urls, targets))

        failed = {u: err for u, err in zip(urls, outcomes) if err}
        succeeded = [t for t, err in zip(targets, outcomes) if not err]
        if failed:
            logger.warning(
                "下载汇总: %d 成功, %d 失败", len(succeeded), len(failed),
            )
            raise PartialDownloadError(
                f"{len(failed)} 个资源下载失败: {', '.join(failed)}",
                failed=failed,
                succeeded=[str(t) for t in succeeded],
            )
        return targets

    def _download_one(self, url: str, dest: Path) -> str:
        """返回空串表示成功，否则为失败原因"""
        logger.info("  下载: %s", url)
        try:
            self._downloader(url, dest)
        except Exception as e:
            # 单个文件的任何失败都只记入汇总，不中断同批其他文件
            dest.unlink(missing_ok=True)
            logger.error("  下载失败: %s - %s: %s", url, type(e).__name__, e)
            return str(e) or type(e).__name__
        return ""

    # ------------------------------------------------------------------
    # 暂存 + 切换
    # ------------------------------------------------------------------

    def stage(self, name: str, version: str) -> Path:
        """创建唯一命名的暂存目录

        Raises:
            ValidationError: 目标存储单元已被另一个库占用（如 "@a/x" 与 "x" 同版本）
        """
        unit = unit_name(name, version)
        owner = self._claimed_units(name).get(unit)
        if owner:
            raise ValidationError(f"存储单元 {unit} 已被 {owner} 占用")
        staging = self.root / (
            f"{STAGING_PREFIX}{unit}-{uuid.uuid4().hex[:8]}"
        )
        staging.mkdir(parents=True)
        return staging

    def commit(self, staging: Path, name: str, version: str) -> Path:
        """删除旧版本，把暂存目录改名为 {name}-{version}"""
        target = self.unit_path(name, version)
        self.remove_installed(name)
        if target.exists():
            shutil.rmtree(target)
        staging.rename(target)
        logger.info("已安装: %s", target)
        return target

    def discard(self, staging: Path) -> None:
        if staging.exists():
            shutil.rmtree(staging)
            logger.info("已清理暂存目录: %s", staging)
