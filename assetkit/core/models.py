"""核心数据模型

资源依赖管理涉及的数据类集中定义于此:
- SelectionConfig: 资源筛选配置（五个开关）
- AssetEntry / FileTree: 注册表文件树的统一表示
- Dependency: 最终产出的依赖描述符，供外部模板层消费
- InstalledRecord: 已安装状态索引中的一条记录
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from assetkit.core.exceptions import ValidationError

ASSET_TYPES = ("js", "css")


class SourceMode(str, Enum):
    """资源来源: 本地文件 / 远程 CDN"""

    LOCAL = "local"
    REMOTE = "remote"


class TreeShape(str, Enum):
    """注册表文件树的形态"""

    DIST = "dist"    # dist/ 目录，其下可能再分 js/ css/
    TYPED = "typed"  # 顶层直接有 js/ css/ 目录
    FLAT = "flat"    # 所有文件平铺在顶层


@dataclass(frozen=True)
class SelectionConfig:
    """资源筛选配置

    除 local 外，关闭的开关会排除带对应标记的文件；
    开启的开关要求文件名必须带有该标记。
    """

    local: bool = True       # 下载到本地，否则引用 CDN
    minified: bool = True    # 仅要压缩版 (*.min.*)
    bundle: bool = False     # 仅要 bundle 版
    lite: bool = False       # 仅要 lite 版
    rtl: bool = False        # 仅要从右到左布局版

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> SelectionConfig:
        """未知字段忽略；已知字段必须是布尔值（"false" 之类的字符串不做转换）

        Raises:
            ValidationError: 开关取值不是布尔值
        """
        if not data:
            return cls()
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        invalid = sorted(k for k, v in known.items() if not isinstance(v, bool))
        if invalid:
            raise ValidationError(
                f"筛选开关必须是布尔值: {', '.join(invalid)}", details=invalid,
            )
        return cls(**known)


@dataclass(frozen=True)
class AssetEntry:
    """注册表文件树中的一个文件"""

    name: str
    hash: str = ""


@dataclass
class FileTree:
    """统一形态的文件树

    base_url 为下载根地址（已含 dist/ 等前缀，以 / 结尾）；
    nested 为 True 时，资源路径需要补回 {type}/ 子目录前缀。
    """

    base_url: str
    assets: list[AssetEntry] = field(default_factory=list)
    nested: bool = False
    shape: TreeShape = TreeShape.FLAT

    def names(self) -> list[str]:
        return [a.name for a in self.assets]


@dataclass
class Dependency:
    """依赖描述符: 由外部模板层生成绑定代码"""

    name: str
    version: str
    source_mode: SourceMode
    scripts: list[str] = field(default_factory=list)
    stylesheets: list[str] = field(default_factory=list)
    remote_base_url: str = ""
    package: str = ""  # 宿主包名，仅 local 模式使用

    @property
    def src(self) -> str:
        """资源根: local 为存储单元目录名，remote 为 CDN 地址"""
        if self.source_mode == SourceMode.LOCAL:
            return f"{self.name}-{self.version}"
        return self.remote_base_url

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "version": self.version,
            "source_mode": self.source_mode.value,
            "src": self.src,
            "scripts": list(self.scripts),
            "stylesheets": list(self.stylesheets),
        }
        if self.remote_base_url:
            data["remote_base_url"] = self.remote_base_url
        if self.package:
            data["package"] = self.package
        return data


@dataclass
class InstalledRecord:
    """已安装状态索引中的一条记录"""

    name: str
    version: str
    source_mode: SourceMode = SourceMode.LOCAL
    path: str = ""  # 本地存储单元目录，remote 模式为空
    scripts: list[str] = field(default_factory=list)
    stylesheets: list[str] = field(default_factory=list)
    remote_base_url: str = ""
    options: dict[str, bool] = field(default_factory=dict)

    @classmethod
    def from_dependency(
        cls, registry_name: str, dep: Dependency, path: str,
        options: SelectionConfig,
    ) -> InstalledRecord:
        return cls(
            name=registry_name,
            version=dep.version,
            source_mode=dep.source_mode,
            path=path,
            scripts=list(dep.scripts),
            stylesheets=list(dep.stylesheets),
            remote_base_url=dep.remote_base_url,
            options=options.to_dict(),
        )

    @classmethod
    def from_dict(cls, name: str, data: dict[str, Any]) -> InstalledRecord:
        return cls(
            name=name,
            version=str(data.get("version", "")),
            source_mode=SourceMode(data.get("source_mode", SourceMode.LOCAL.value)),
            path=data.get("path", ""),
            scripts=list(data.get("scripts") or []),
            stylesheets=list(data.get("stylesheets") or []),
            remote_base_url=data.get("remote_base_url", ""),
            options=dict(data.get("options") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["source_mode"] = self.source_mode.value
        del data["name"]
        return data


def bare_name(name: str) -> str:
    """去掉作用域前缀: "@vizuaalog/bulmajs" -> "bulmajs"

    注册表查询需保留作用域，本地目录与描述符名使用裸名。
    """
    return name.rstrip("/").rsplit("/", 1)[-1]


def unit_name(name: str, version: str) -> str:
    """存储单元目录名 {name}-{version}"""
    return f"{bare_name(name)}-{version}"
