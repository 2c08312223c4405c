"""已安装索引测试"""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from assetkit.core.exceptions import ConfigError
from assetkit.core.index import InstalledIndex
from assetkit.core.models import InstalledRecord, SourceMode


def _record(name: str = "alpha", version: str = "1.0.0") -> InstalledRecord:
    return InstalledRecord(
        name=name,
        version=version,
        path=f"inst/{name}-{version}",
        scripts=[f"js/{name}.min.js"],
        options={"local": True, "minified": True},
    )


class TestInstalledIndex:
    def test_empty_when_missing(self, tmp_path: Path) -> None:
        index = InstalledIndex(tmp_path / "idx.yml")
        assert index.get("alpha") is None
        assert index.records() == []

    def test_put_persists(self, tmp_path: Path) -> None:
        path = tmp_path / "sub" / "idx.yml"
        InstalledIndex(path).put(_record())

        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert raw["installed"]["alpha"]["version"] == "1.0.0"
        assert raw["installed"]["alpha"]["source_mode"] == "local"

        again = InstalledIndex(path).get("alpha")
        assert again is not None
        assert again.scripts == ["js/alpha.min.js"]
        assert again.options["minified"] is True

    def test_put_replaces(self, tmp_path: Path) -> None:
        index = InstalledIndex(tmp_path / "idx.yml")
        index.put(_record(version="1.0.0"))
        index.put(_record(version="2.0.0"))
        assert [r.version for r in index.records()] == ["2.0.0"]

    def test_remove(self, tmp_path: Path) -> None:
        index = InstalledIndex(tmp_path / "idx.yml")
        index.put(_record())
        assert index.remove("alpha") is True
        assert index.remove("alpha") is False
        assert InstalledIndex(tmp_path / "idx.yml").get("alpha") is None

    def test_scoped_key(self, tmp_path: Path) -> None:
        index = InstalledIndex(tmp_path / "idx.yml")
        index.put(InstalledRecord(
            name="@scope/widget", version="0.2.0", source_mode=SourceMode.REMOTE,
            remote_base_url="https://cdn.test/npm/@scope/widget@0.2.0/",
        ))
        rec = InstalledIndex(tmp_path / "idx.yml").get("@scope/widget")
        assert rec is not None
        assert rec.source_mode == SourceMode.REMOTE
        assert rec.path == ""

    def test_reload_sees_external_edit(self, tmp_path: Path) -> None:
        path = tmp_path / "idx.yml"
        index = InstalledIndex(path)
        InstalledIndex(path).put(_record())
        assert index.get("alpha") is None
        index.reload()
        assert index.get("alpha") is not None


class TestBrokenIndex:
    def test_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "idx.yml"
        path.write_text("installed: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="安装索引格式错误"):
            InstalledIndex(path)

    def test_non_mapping_treated_as_empty(self, tmp_path: Path) -> None:
        path = tmp_path / "idx.yml"
        path.write_text("- alpha\n", encoding="utf-8")
        assert InstalledIndex(path).records() == []

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        index = InstalledIndex(tmp_path / "idx.yml")
        index.put(_record())
        index.put(_record(version="2.0.0"))
        assert [p.name for p in tmp_path.iterdir()] == ["idx.yml"]
