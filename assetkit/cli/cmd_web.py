"""CLI: Web API 服务"""

from __future__ import annotations

import click


def register(group: click.Group) -> None:
    group.add_command(serve)


@click.command()
@click.option("--host", default="127.0.0.1", help="监听地址")
@click.option("--port", default=8888, help="监听端口")
def serve(host: str, port: int) -> None:
    """启动依赖管理 Web API"""
    from assetkit.web.app import app
    click.echo(f"Web API 启动: http://{host}:{port}/api/deps")
    app.run(host=host, port=port)
