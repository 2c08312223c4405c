"""资源筛选测试"""

from __future__ import annotations

import itertools

import pytest

from assetkit.core.models import AssetEntry, SelectionConfig
from assetkit.core.selector import compile_filter, select_assets

NAMES = [
    "lib.js",
    "lib.min.js",
    "lib.lite.js",
    "lib.lite.min.js",
    "lib.bundle.js",
    "lib.bundle.min.js",
    "lib.min.js.map",
    "lib.bundle.min.js.map",
    "lib.css",
    "lib.min.css",
    "lib.rtl.css",
    "lib.rtl.min.css",
    "lib.min.css.map",
]

MARKERS = {"lite": "lite", "bundle": "bundle", "rtl": "rtl", "minified": "min"}


class TestSourcemapExcluded:
    @pytest.mark.parametrize(
        "flags", list(itertools.product([True, False], repeat=4)),
    )
    @pytest.mark.parametrize("asset_type", ["js", "css"])
    def test_never_returns_map(self, flags: tuple[bool, ...], asset_type: str) -> None:
        minified, bundle, lite, rtl = flags
        cfg = SelectionConfig(minified=minified, bundle=bundle, lite=lite, rtl=rtl)
        result = select_assets(NAMES, asset_type, False, cfg) or []
        assert not any("map" in n for n in result)


class TestSingleFlag:
    """只开一个开关时，结果都带该标记且不带其他标记"""

    @pytest.mark.parametrize("flag", ["lite", "bundle", "rtl", "minified"])
    def test_only_enabled_marker(self, flag: str) -> None:
        cfg = SelectionConfig(**{
            "minified": False, "bundle": False, "lite": False, "rtl": False,
            flag: True,
        })
        found: list[str] = []
        for asset_type in ("js", "css"):
            found.extend(select_assets(NAMES, asset_type, False, cfg) or [])

        assert found
        others = [m for f, m in MARKERS.items() if f != flag]
        for name in found:
            assert MARKERS[flag] in name
            assert not any(m in name for m in others)

    def test_default_config_picks_minified(self) -> None:
        cfg = SelectionConfig()
        assert select_assets(NAMES, "js", False, cfg) == ["lib.min.js"]
        assert select_assets(NAMES, "css", False, cfg) == ["lib.min.css"]

    def test_full_files(self) -> None:
        cfg = SelectionConfig(minified=False)
        assert select_assets(NAMES, "js", False, cfg) == ["lib.js"]

    def test_combined_flags(self) -> None:
        cfg = SelectionConfig(bundle=True, minified=True)
        assert select_assets(NAMES, "js", False, cfg) == ["lib.bundle.min.js"]


class TestAbsence:
    def test_none_when_only_bundled(self) -> None:
        """只有 bundle 文件而 bundle=False 时返回 None，不是空列表"""
        names = ["lib.bundle.min.js", "lib.bundle.js"]
        result = select_assets(names, "js", False, SelectionConfig())
        assert result is None

    def test_none_on_empty_input(self) -> None:
        assert select_assets([], "css", True, SelectionConfig()) is None


class TestNestedAndOrder:
    def test_nested_prefix(self) -> None:
        assets = [AssetEntry("a.min.js", "h1"), AssetEntry("b.min.js", "h2")]
        result = select_assets(assets, "js", True, SelectionConfig())
        assert result == ["js/a.min.js", "js/b.min.js"]

    def test_preserves_listing_order(self) -> None:
        names = ["z.min.js", "a.min.js", "m.min.js"]
        assert select_assets(names, "js", False, SelectionConfig()) == names

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(ValueError, match="不支持的资源类型"):
            select_assets(NAMES, "png", False, SelectionConfig())

    def test_compile_filter_order(self) -> None:
        pattern = compile_filter("js", SelectionConfig(lite=True))
        assert pattern.pattern == (
            "^(?!.*map)(?=.*lite)(?!.*bundle)(?!.*rtl)(?=.*min)(?=.*js)"
        )
