"""assetkit 命令行接口

按领域拆分为子模块，每个模块注册自己的命令到 main group。
"""

from __future__ import annotations

import functools
from pathlib import Path
from typing import Any, Callable

import click

from assetkit import __version__
from assetkit.core.config import DEFAULT_CONFIG_FILE, init_config
from assetkit.core.exceptions import AssetKitError
from assetkit.services.container import get_container, reset_container
from assetkit.utils.logger import setup_logging_from_env


def _svc() -> Any:
    """获取全局服务容器的快捷方式"""
    return get_container()


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """把业务异常转为 click 错误（退出码 1）"""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except AssetKitError as e:
            raise click.ClickException(f"[{e.code}] {e}") from e

    return wrapper


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--config", "-c", "config_path", default="",
    help=f"配置文件路径（默认 {DEFAULT_CONFIG_FILE}，不存在则使用内置默认值）",
)
def main(config_path: str) -> None:
    """assetkit - 前端资源依赖管理"""
    setup_logging_from_env()
    path = config_path or DEFAULT_CONFIG_FILE
    if config_path or Path(path).exists():
        init_config(path)
        reset_container()


# 注册各领域子命令
from assetkit.cli.cmd_deps import register as _reg_deps  # noqa: E402
from assetkit.cli.cmd_query import register as _reg_query  # noqa: E402
from assetkit.cli.cmd_web import register as _reg_web  # noqa: E402

_reg_deps(main)
_reg_query(main)
_reg_web(main)
