"""
CLI 模块

命令行接口实现。
"""

import asyncio
import json
from pathlib import Path
from typing import List, Optional

import click
import toml
import yaml
from loguru import logger

from modpanel import __version__
from modpanel.exceptions import ModPanelError
from modpanel.logger import setup_logger
from modpanel.models import ModLoader, NotificationStatus, Outcome, PanelConfig, Server
from modpanel.pages import ModsPage, LOADERS


DEFAULT_CONFIG = "modpanel.toml"


def load_config(config_path: Optional[str]) -> dict:
    """加载配置文件，未指定且默认文件不存在时返回空配置"""
    if config_path is None:
        if not Path(DEFAULT_CONFIG).exists():
            return {}
        config_path = DEFAULT_CONFIG

    path = Path(config_path)

    if not path.exists():
        raise click.ClickException(f"配置文件不存在: {config_path}")

    suffix = path.suffix.lower()

    try:
        if suffix == ".toml":
            return toml.load(config_path)
        elif suffix == ".json":
            return json.loads(path.read_text())
        elif suffix in (".yaml", ".yml"):
            return yaml.safe_load(path.read_text()) or {}
    except (toml.TomlDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        raise click.ClickException(f"配置文件解析失败: {e}")

    raise click.ClickException(f"不支持的配置文件格式: {suffix}")


def build_page(
    config: PanelConfig,
    server_uuid: str,
    game_version: Optional[str],
    loader: Optional[str],
) -> ModsPage:
    page = ModsPage(Server(uuid=server_uuid), config)
    if game_version:
        page.game_version = game_version
    if loader:
        page.mod_loader = ModLoader(loader)
    return page


def echo_notifications(page: ModsPage):
    """输出页面通知"""
    colors = {
        NotificationStatus.SUCCESS: "green",
        NotificationStatus.WARNING: "yellow",
        NotificationStatus.DANGER: "red",
    }
    for notification in page.notifications:
        click.secho(
            f"{notification.title}: {notification.body}",
            fg=colors[notification.status],
            err=notification.status != NotificationStatus.SUCCESS,
        )


async def run_fetch(page: ModsPage, query: str, selected: List[str]) -> Outcome:
    """搜索后下载选中的模组，搜索失败时不再继续下载"""
    sent = len(page.notifications)
    await page.search_mods(query)
    if any(n.status == NotificationStatus.DANGER for n in page.notifications[sent:]):
        return Outcome.FAILED
    page.select(selected)
    return await page.download_selected_mods()


filter_options = [
    click.option("-v", "--game-version", help="Minecraft 版本"),
    click.option(
        "-l",
        "--loader",
        type=click.Choice(list(LOADERS)),
        help="模组加载器",
    ),
]


def with_filters(func):
    for option in reversed(filter_options):
        func = option(func)
    return func


@click.group()
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(),
    help=f"配置文件路径（默认 {DEFAULT_CONFIG}）",
)
@click.option("--debug", is_flag=True, help="启用调试模式")
@click.version_option(version=__version__)
@click.pass_context
def main(ctx: click.Context, config_path: Optional[str], debug: bool):
    """ModPanel - 在受管游戏服务器上搜索并安装 Modrinth 模组"""
    setup_logger(level="DEBUG" if debug else None)

    try:
        ctx.obj = PanelConfig.from_dict(load_config(config_path))
    except ModPanelError as e:
        logger.error(f"配置错误: {e}")
        raise click.ClickException(str(e))


@main.command()
@click.argument("query")
@with_filters
@click.option("--limit", type=click.IntRange(min=1), help="返回结果数量")
@click.pass_obj
def search(
    config: PanelConfig,
    query: str,
    game_version: Optional[str],
    loader: Optional[str],
    limit: Optional[int],
):
    """搜索模组"""
    if limit:
        config.defaults.limit = limit
    page = build_page(config, "", game_version, loader)
    options = asyncio.run(page.search_mods(query))

    echo_notifications(page)
    for mod_id, label in options.items():
        click.echo(f"{mod_id}\t{label}")
    if any(n.status == NotificationStatus.DANGER for n in page.notifications):
        raise click.exceptions.Exit(1)


@main.command()
@click.argument("query")
@click.option(
    "-s",
    "--select",
    "selected",
    multiple=True,
    required=True,
    help="要下载的模组 ID（可多次使用）",
)
@click.option("--server", "server_uuid", required=True, help="目标服务器 UUID")
@click.option("-d", "--directory", help="目标目录")
@with_filters
@click.pass_obj
def fetch(
    config: PanelConfig,
    query: str,
    selected: tuple,
    server_uuid: str,
    directory: Optional[str],
    game_version: Optional[str],
    loader: Optional[str],
):
    """搜索模组并把选中的模组下载到服务器"""
    if directory:
        config.defaults.directory = directory
    page = build_page(config, server_uuid, game_version, loader)
    outcome = asyncio.run(run_fetch(page, query, list(selected)))

    echo_notifications(page)
    if outcome != Outcome.SUCCESS:
        raise click.exceptions.Exit(1)


if __name__ == "__main__":
    main()
