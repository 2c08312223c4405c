"""已安装状态索引

一个 YAML 文件记录 库名 → 已安装版本及描述符信息，
替代每次按目录名模式匹配推断安装状态。CDN 引用的依赖没有本地目录，也记录在此。

文件结构:
    installed:
      bootstrap:
        version: 5.3.3
        source_mode: local
        path: inst/bootstrap-5.3.3
        scripts: [js/bootstrap.min.js]
        stylesheets: [css/bootstrap.min.css]
        options: {local: true, minified: true, ...}
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any

from assetkit.core.models import InstalledRecord
from assetkit.utils.yaml_io import load_yaml, save_yaml

logger = logging.getLogger(__name__)


class InstalledIndex:
    """基于 YAML 文件的已安装索引"""

    section_key = "installed"

    def __init__(self, index_file: str | Path) -> None:
        self.index_file = Path(index_file)
        self._lock = threading.Lock()
        self._data: dict[str, Any] = load_yaml(self.index_file, label="安装索引")

    def _section(self) -> dict[str, dict[str, Any]]:
        result: dict[str, dict[str, Any]] = self._data.setdefault(self.section_key, {})
        return result

    def _save(self) -> None:
        save_yaml(self.index_file, self._data, label="安装索引")

    def reload(self) -> None:
        with self._lock:
            self._data = load_yaml(self.index_file, label="安装索引")

    def get(self, name: str) -> InstalledRecord | None:
        raw = self._section().get(name)
        if not raw:
            return None
        return InstalledRecord.from_dict(name, raw)

    def put(self, record: InstalledRecord) -> InstalledRecord:
        with self._lock:
            self._section()[record.name] = record.to_dict()
            self._save()
        logger.info("索引已更新: %s@%s", record.name, record.version)
        return record

    def remove(self, name: str) -> bool:
        with self._lock:
            section = self._section()
            if name not in section:
                return False
            del section[name]
            self._save()
        logger.info("索引已删除: %s", name)
        return True

    def records(self) -> list[InstalledRecord]:
        return [
            InstalledRecord.from_dict(k, v)
            for k, v in self._section().items() if v
        ]
