"""注册表客户端

职责:
- 查询库的全部版本（新到旧）与 latest 稳定版标记
- 查询指定版本的文件树并识别形态
- 拼接 CDN 下载地址

每次查询对应一次注册表请求，不做缓存，不做重试（重试由调用方决定）。
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from dataclasses import dataclass, field
from typing import Any, Callable

from assetkit.core.exceptions import (
    AssetKitError,
    LibraryNotFoundError,
    RegistryUnavailableError,
)
from assetkit.core.models import FileTree
from assetkit.core.registry.tree import parse_file_tree
from assetkit.utils.net import validate_url_scheme

logger = logging.getLogger(__name__)

DEFAULT_REGISTRY_API = "https://data.jsdelivr.com/v1/package/npm/"
DEFAULT_CDN_ROOT = "https://cdn.jsdelivr.net/npm/"

# 传输层策略：接受 URL，返回解码后的 JSON
JsonFetcher = Callable[[str], Any]


def http_get_json(url: str, timeout: int = 30) -> Any:
    """GET 并解码 JSON

    Raises:
        LibraryNotFoundError: HTTP 404
        RegistryUnavailableError: 其他 HTTP 错误、网络错误或 JSON 无法解析
    """
    validate_url_scheme(url, context="registry")
    req = urllib.request.Request(url, headers={"Accept": "application/json"})
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:  # nosec B310
            raw = resp.read().decode("utf-8")
    except urllib.error.HTTPError as e:
        if e.code == 404:
            raise LibraryNotFoundError(f"注册表中不存在: {url}") from e
        raise RegistryUnavailableError(f"注册表返回 HTTP {e.code}: {url}") from e
    except (urllib.error.URLError, OSError) as e:
        raise RegistryUnavailableError(f"注册表请求失败: {url} - {e}") from e
    except UnicodeDecodeError as e:
        raise RegistryUnavailableError(f"注册表响应编码错误: {url}") from e

    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise RegistryUnavailableError(f"注册表响应不是合法 JSON: {url}") from e


@dataclass
class VersionInfo:
    """一次查询得到的版本信息"""

    versions: list[str] = field(default_factory=list)  # 新到旧
    latest_stable: str = ""

    @property
    def newest(self) -> str:
        """版本列表第一个（可能是预发布版）"""
        return self.versions[0] if self.versions else ""

    def rank(self, version: str) -> int:
        """版本在列表中的位置，越小越新；未知版本视为最旧"""
        try:
            return self.versions.index(version)
        except ValueError:
            return len(self.versions)


class RegistryClient:
    """npm 注册表客户端（jsDelivr data API）"""

    def __init__(
        self,
        api_root: str = DEFAULT_REGISTRY_API,
        cdn_root: str = DEFAULT_CDN_ROOT,
        fetch_json: JsonFetcher | None = None,
        timeout: int = 30,
    ) -> None:
        self.api_root = api_root if api_root.endswith("/") else api_root + "/"
        self.cdn_root = cdn_root if cdn_root.endswith("/") else cdn_root + "/"
        self.timeout = timeout
        self._fetch_json = fetch_json or self._default_fetch

    def _default_fetch(self, url: str) -> Any:
        return http_get_json(url, timeout=self.timeout)

    def _query(self, path: str) -> dict[str, Any]:
        url = f"{self.api_root}{path}"
        logger.info("查询注册表: %s", url)
        try:
            data = self._fetch_json(url)
        except AssetKitError as e:
            logger.error("注册表查询失败: %s - %s", url, e)
            raise
        if not isinstance(data, dict):
            raise RegistryUnavailableError(f"注册表响应格式无法解析: {url}")
        logger.debug("注册表查询成功: %s", url)
        return data

    # ---- 版本 ----

    def version_info(self, name: str) -> VersionInfo:
        """一次请求同时取得版本列表与 latest 稳定版"""
        data = self._query(name)
        raw_versions = data.get("versions")
        if not isinstance(raw_versions, list):
            raise RegistryUnavailableError(f"注册表未返回 {name} 的版本列表")

        versions: list[str] = []
        for v in raw_versions:
            # 新版 API 返回 {"version": "x", ...}，旧版直接是字符串
            if isinstance(v, dict):
                v = v.get("version")
            if v:
                versions.append(str(v))

        tags = data.get("tags") or {}
        latest = str(tags.get("latest") or "") if isinstance(tags, dict) else ""
        return VersionInfo(versions=versions, latest_stable=latest)

    def list_versions(self, name: str) -> list[str]:
        """全部版本，新到旧"""
        return self.version_info(name).versions

    def latest_stable(self, name: str) -> str:
        """注册表标记的 latest 稳定版"""
        latest = self.version_info(name).latest_stable
        if not latest:
            raise RegistryUnavailableError(f"注册表未返回 {name} 的 latest 标记")
        return latest

    # ---- 文件树 ----

    def cdn_url(self, name: str, version: str) -> str:
        """{cdnRoot}{name}@{version}/"""
        return f"{self.cdn_root}{name}@{version}/"

    def fetch_file_tree(self, name: str, version: str = "latest") -> FileTree:
        """查询 name@version 的文件树，version 为 "latest" 时取稳定版"""
        if version == "latest":
            version = self.latest_stable(name)
        data = self._query(f"{name}@{version}")
        tree = parse_file_tree(data.get("files"), self.cdn_url(name, version))
        logger.info(
            "%s@%s: %d 个候选文件 (%s)",
            name, version, len(tree.assets), tree.shape.value,
        )
        return tree
