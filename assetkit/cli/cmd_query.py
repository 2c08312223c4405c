"""CLI: 注册表与已安装状态查询"""

from __future__ import annotations

import click

from assetkit.cli import _svc, handle_errors


def register(group: click.Group) -> None:
    group.add_command(versions)
    group.add_command(files)
    group.add_command(installed)


@click.command()
@click.argument("name")
@click.option("--latest", is_flag=True, help="只输出 latest 稳定版")
@handle_errors
def versions(name: str, latest: bool) -> None:
    """列出注册表中的全部版本（新到旧）"""
    svc = _svc()
    info = svc.registry.version_info(name)
    if latest:
        click.echo(info.latest_stable)
        return
    record = svc.store.find_installed(name)
    current = record.version if record else ""
    for v in info.versions:
        marks = []
        if v == info.latest_stable:
            marks.append("latest")
        if v == current:
            marks.append("已安装")
        suffix = f"  <- {', '.join(marks)}" if marks else ""
        click.echo(f"  {v}{suffix}")


@click.command()
@click.argument("name")
@click.option("--version", default="latest", help="指定版本（默认 latest 稳定版）")
@handle_errors
def files(name: str, version: str) -> None:
    """查看某个版本的候选文件"""
    tree = _svc().registry.fetch_file_tree(name, version)
    click.echo(f"base: {tree.base_url}")
    click.echo(f"shape: {tree.shape.value}  nested: {tree.nested}")
    for a in tree.assets:
        click.echo(f"  {a.name}")


@click.command()
@click.argument("name", required=False)
@handle_errors
def installed(name: str | None) -> None:
    """查看已安装的依赖"""
    dm = _svc().deps
    if name:
        r = dm.installed(name)
        click.echo(f"{r.name} {r.version} [{r.source_mode.value}] {r.path or r.remote_base_url}")
        return
    records = dm.list_installed()
    if not records:
        click.echo("没有已安装的依赖。")
        return
    for r in records:
        location = r.path or r.remote_base_url
        click.echo(f"  {r.name:24s} {r.version:12s} [{r.source_mode.value:6s}] {location}")
