"""CLI: 依赖安装 / 更新 / 删除"""

from __future__ import annotations

import click

from assetkit.cli import _svc, handle_errors
from assetkit.core.models import SelectionConfig
from assetkit.utils.yaml_io import dump_yaml


def register(group: click.Group) -> None:
    group.add_command(create)
    group.add_command(update)
    group.add_command(remove)
    group.add_command(custom)


@click.command()
@click.argument("name")
@click.option("--version", default=None, help="指定版本（默认 latest 稳定版）")
@click.option("--cdn", is_flag=True, help="引用 CDN，不下载到本地")
@click.option("--full", is_flag=True, help="使用未压缩文件")
@click.option("--bundle", is_flag=True, help="仅使用 bundle 文件")
@click.option("--lite", is_flag=True, help="仅使用 lite 文件")
@click.option("--rtl", is_flag=True, help="仅使用从右到左布局文件")
@handle_errors
def create(
    name: str, version: str | None, cdn: bool, full: bool,
    bundle: bool, lite: bool, rtl: bool,
) -> None:
    """安装依赖并输出描述符"""
    options = SelectionConfig(
        local=not cdn, minified=not full, bundle=bundle, lite=lite, rtl=rtl,
    )
    dep = _svc().deps.create(name, version=version, options=options)
    click.echo(dump_yaml(dep.to_dict()), nl=False)


@click.command()
@click.argument("name")
@click.option("--version", "target", default="latest", help="目标版本（默认版本列表中最新的一个）")
@click.option("--dry-run", is_flag=True, help="只显示升级/降级决策")
@handle_errors
def update(name: str, target: str, dry_run: bool) -> None:
    """升级或降级已安装的依赖"""
    dm = _svc().deps
    if dry_run:
        plan = dm.plan_update(name, target)
        click.echo(
            f"{plan.direction.value}: {name} {plan.current} -> {plan.target} "
            f"(latest {plan.latest})"
        )
        return
    dep = dm.update(name, target)
    click.echo(dump_yaml(dep.to_dict()), nl=False)


@click.command()
@click.argument("name")
@handle_errors
def remove(name: str) -> None:
    """删除已安装的依赖"""
    _svc().deps.remove(name)
    click.echo(f"已删除: {name}")


@click.command()
@click.argument("name")
@click.argument("version")
@click.option("--script", "scripts", multiple=True, help="脚本文件（可多次指定）")
@click.option("--stylesheet", "stylesheets", multiple=True, help="样式表文件（可多次指定）")
@handle_errors
def custom(
    name: str, version: str,
    scripts: tuple[str, ...], stylesheets: tuple[str, ...],
) -> None:
    """把项目自有的脚本/样式表包装为本地依赖"""
    dep = _svc().deps.create_custom(
        name, version, scripts=list(scripts), stylesheets=list(stylesheets),
    )
    click.echo(dump_yaml(dep.to_dict()), nl=False)
