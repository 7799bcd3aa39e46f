"""
模组页面

保存搜索条件、搜索结果和选择状态，向外提供搜索与下载两个入口，
并把结果转换为用户通知。
"""

from typing import Callable, Dict, Iterable, List, Optional

from loguru import logger

from modpanel.exceptions import ModPanelError, UpstreamError
from modpanel.messages import trans
from modpanel.models import (
    DownloadItem,
    ModLoader,
    ModSummary,
    Notification,
    NotificationStatus,
    Outcome,
    PanelConfig,
    SearchQuery,
    Server,
)
from modpanel.services import DaemonFileRepository, DownloadOrchestrator, ModrinthClient


GAME_VERSIONS = {
    "1.20.1": "1.20.1",
    "1.19.4": "1.19.4",
    "1.19.2": "1.19.2",
    "1.18.2": "1.18.2",
    "1.17.1": "1.17.1",
    "1.16.5": "1.16.5",
}

LOADERS = {
    ModLoader.FORGE.value: "Forge",
    ModLoader.FABRIC.value: "Fabric",
    ModLoader.QUILT.value: "Quilt",
}


class ModsPage:
    """服务器模组页面"""

    def __init__(
        self,
        server: Server,
        config: Optional[PanelConfig] = None,
        client_factory: Optional[Callable[[], ModrinthClient]] = None,
        orchestrator_factory: Optional[Callable[[], DownloadOrchestrator]] = None,
    ):
        self.server = server
        self.config = config or PanelConfig()
        self._client_factory = client_factory or (
            lambda: ModrinthClient(self.config.modrinth)
        )
        self._orchestrator_factory = orchestrator_factory or (
            lambda: DownloadOrchestrator(
                DaemonFileRepository(self.config.daemon),
                mods_directory=self.config.defaults.directory,
            )
        )

        self.search_query: str = ""
        self.game_version: str = self.config.defaults.game_version
        self.mod_loader: ModLoader = self.config.defaults.loader
        self.search_results: List[ModSummary] = []
        self.selected_mods: List[str] = []
        self.notifications: List[Notification] = []

    def notify(self, title: str, body: str, status: NotificationStatus) -> Notification:
        notification = Notification(title=title, body=body, status=status)
        self.notifications.append(notification)
        return notification

    async def search_mods(self, query: str) -> Dict[str, str]:
        """
        搜索模组并保存结果

        Args:
            query: 搜索关键字，为空时不发起请求

        Returns:
            可选项 {mod_id: 标签}
        """
        self.search_query = query
        if not query:
            return self.get_mod_options()

        search = SearchQuery(
            query=query,
            game_version=self.game_version,
            loader=self.mod_loader,
            limit=self.config.defaults.limit,
        )

        try:
            async with self._client_factory() as client:
                self.search_results = await client.search(search)
        except UpstreamError as e:
            logger.error(f"搜索模组失败: {e}")
            self.notify(
                trans("search.failed"),
                f"Failed to search mods: {e.message}",
                NotificationStatus.DANGER,
            )
            return self.get_mod_options()

        if not self.search_results:
            self.notify(
                trans("search.no_results"),
                trans("search.no_results_body"),
                NotificationStatus.WARNING,
            )
        logger.info(f"搜索 '{query}' 找到 {len(self.search_results)} 个模组")
        return self.get_mod_options()

    def get_mod_options(self) -> Dict[str, str]:
        """将搜索结果转换为 {mod_id: "标题 - 描述"}"""
        return {mod.mod_id: mod.label for mod in self.search_results}

    def select(self, mod_ids: Iterable[str]) -> None:
        self.selected_mods = list(mod_ids)

    async def _resolve_downloads(self, client: ModrinthClient) -> List[DownloadItem]:
        """为每个选中的模组解析最新兼容版本的下载项"""
        results = {mod.mod_id: mod for mod in self.search_results}
        items = []
        for mod_id in self.selected_mods:
            mod = results.get(mod_id)
            if mod is None:
                logger.debug(f"模组 {mod_id} 不在搜索结果中，跳过")
                continue

            versions = await client.get_versions(
                mod_id,
                loaders=[self.mod_loader.value],
                game_versions=[self.game_version],
            )
            if not versions:
                logger.warning(
                    f"模组 '{mod.title}' 没有 {self.mod_loader.value} {self.game_version} 的兼容版本"
                )
                continue

            latest = versions[0]
            url = await client.resolve_download_url(latest.id)
            primary = latest.primary_file
            if not url or primary is None:
                logger.warning(f"模组 '{mod.title}' 的版本 {latest.id} 没有可下载文件")
                continue

            items.append(DownloadItem(url=url, filename=primary.filename))
        return items

    async def download_selected_mods(self) -> Outcome:
        """
        下载选中的模组

        Returns:
            操作结果，同时会发送对应的通知
        """
        if not self.selected_mods:
            self.notify(
                trans("download.no_selection"),
                trans("download.no_selection_body"),
                NotificationStatus.WARNING,
            )
            return Outcome.NO_SELECTION

        try:
            async with self._client_factory() as client:
                items = await self._resolve_downloads(client)

            if not items:
                self.notify(
                    trans("download.no_versions"),
                    trans("download.no_versions_body"),
                    NotificationStatus.WARNING,
                )
                return Outcome.NO_VERSIONS

            async with self._orchestrator_factory() as orchestrator:
                directory = orchestrator.get_mods_directory(self.server)
                logger.info(f"开始下载 {len(items)} 个模组到 {self.server.uuid}:{directory}")
                await orchestrator.download_many(self.server, items, directory)

        except ModPanelError as e:
            logger.error(f"下载模组失败: {e}")
            self.notify(
                trans("download.failed"),
                f"Failed to download mods: {e.message}",
                NotificationStatus.DANGER,
            )
            return Outcome.FAILED

        self.notify(
            trans("download.started"),
            trans("download.body"),
            NotificationStatus.SUCCESS,
        )
        self.selected_mods = []
        self.search_results = []
        return Outcome.SUCCESS
