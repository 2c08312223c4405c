"""依赖描述符构建"""

from __future__ import annotations

from assetkit.core.exceptions import NoAssetsMatchedError
from assetkit.core.models import Dependency, SelectionConfig, SourceMode, bare_name


def version_from_url(base_url: str) -> str:
    """从下载地址中取出版本号

    "https://cdn.jsdelivr.net/npm/bootstrap@5.3.3/dist/" -> "5.3.3"
    """
    return base_url.rsplit("@", 1)[-1].split("/", 1)[0]


def _with_type_folder(paths: list[str] | None, asset_type: str) -> list[str]:
    """本地模式下确保路径带 {type}/ 前缀"""
    prefix = f"{asset_type}/"
    return [p if p.startswith(prefix) else prefix + p for p in paths or []]


def build_dependency(
    name: str,
    base_url: str,
    scripts: list[str] | None,
    stylesheets: list[str] | None,
    options: SelectionConfig,
    package: str = "",
) -> Dependency:
    """组装描述符

    版本号取自下载地址，而非调用方传入的标签（"latest" 已在此之前被解析为具体版本）。

    Raises:
        NoAssetsMatchedError: 脚本和样式表都没有匹配
    """
    if not scripts and not stylesheets:
        raise NoAssetsMatchedError(f"未找到 {name} 在当前配置下可安装的资源")

    version = version_from_url(base_url)
    if options.local:
        return Dependency(
            name=bare_name(name),
            version=version,
            source_mode=SourceMode.LOCAL,
            scripts=_with_type_folder(scripts, "js"),
            stylesheets=_with_type_folder(stylesheets, "css"),
            package=package,
        )
    return Dependency(
        name=bare_name(name),
        version=version,
        source_mode=SourceMode.REMOTE,
        scripts=list(scripts or []),
        stylesheets=list(stylesheets or []),
        remote_base_url=base_url,
    )
