"""测试共享 fixture: 内存注册表 + 假下载器

  FakeRegistry      RegistryClient(fetch_json=FakeRegistry)
  FakeDownloader    LocalStore(downloader=FakeDownloader)

所有测试不访问网络，存储根目录位于 tmp_path/inst。
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

import pytest

from assetkit.core.config import Config
from assetkit.core.exceptions import LibraryNotFoundError
from assetkit.core.index import InstalledIndex
from assetkit.core.lifecycle import DependencyManager
from assetkit.core.registry import RegistryClient
from assetkit.core.store import LocalStore
from assetkit.services.container import ServiceContainer

API = "https://registry.test/v1/package/npm/"
CDN = "https://cdn.test/npm/"


class FakeRegistry:
    """按 URL 返回预置 JSON，未登记的库返回 LibraryNotFoundError"""

    def __init__(self) -> None:
        self.responses: dict[str, Any] = {}
        self.calls: list[str] = []

    @staticmethod
    def file(name: str) -> dict[str, Any]:
        return {"type": "file", "name": name, "hash": f"h-{name}", "size": 10}

    @staticmethod
    def dir(name: str, children: list[dict[str, Any]]) -> dict[str, Any]:
        return {"type": "directory", "name": name, "files": children}

    def add_package(
        self, name: str, versions: list[str], latest: str | None = None,
    ) -> None:
        self.responses[name] = {
            "tags": {"latest": latest or versions[0]},
            "versions": list(versions),
        }

    def add_tree(self, name: str, version: str, files: list[dict[str, Any]]) -> None:
        self.responses[f"{name}@{version}"] = {
            "type": "npm", "name": name, "version": version, "files": files,
        }

    def add_flat(self, name: str, version: str, filenames: list[str]) -> None:
        self.add_tree(name, version, [self.file(n) for n in filenames])

    def __call__(self, url: str) -> Any:
        self.calls.append(url)
        key = url[len(API):]
        if key not in self.responses:
            raise LibraryNotFoundError(f"注册表中不存在: {url}")
        return self.responses[key]


class FakeDownloader:
    """把 URL 写成文件内容；fail 中的文件名会抛 ConnectionError"""

    def __init__(self) -> None:
        self.fail: set[str] = set()
        self.urls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, url: str, dest: Path) -> None:
        with self._lock:
            self.urls.append(url)
        if url.rsplit("/", 1)[-1] in self.fail:
            raise ConnectionError(f"下载失败: {url}")
        dest.write_text(f"/* {url} */", encoding="utf-8")


@pytest.fixture()
def fake_registry() -> FakeRegistry:
    return FakeRegistry()


@pytest.fixture()
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture()
def storage_root(tmp_path: Path) -> Path:
    return tmp_path / "inst"


@pytest.fixture()
def registry_client(fake_registry: FakeRegistry) -> RegistryClient:
    return RegistryClient(api_root=API, cdn_root=CDN, fetch_json=fake_registry)


@pytest.fixture()
def store(storage_root: Path, downloader: FakeDownloader) -> LocalStore:
    index = InstalledIndex(storage_root / ".assetkit.yml")
    return LocalStore(storage_root, index, downloader=downloader, max_workers=4)


@pytest.fixture()
def manager(registry_client: RegistryClient, store: LocalStore) -> DependencyManager:
    return DependencyManager(registry_client, store, package_name="hostpkg")


@pytest.fixture()
def container(
    storage_root: Path, registry_client: RegistryClient, store: LocalStore,
) -> ServiceContainer:
    """注入假注册表和假下载器的服务容器"""
    cfg = Config(
        storage_root=str(storage_root),
        index_file=str(storage_root / ".assetkit.yml"),
        registry_api=API,
        cdn_root=CDN,
        package_name="hostpkg",
    )
    c = ServiceContainer(config=cfg)
    c._instances["registry"] = registry_client
    c._instances["index"] = store.index
    c._instances["store"] = store
    return c
