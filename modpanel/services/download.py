"""
下载编排

确保目标目录存在，并按顺序让文件管理守护进程拉取每个模组文件。
"""

import posixpath
from typing import Iterable, Tuple

from loguru import logger

from modpanel.exceptions import (
    DaemonError,
    DaemonNotFoundError,
    DirectoryError,
    DownloadError,
    ModPanelError,
)
from modpanel.models import (
    DirectoryState,
    DownloadItem,
    DownloadRequest,
    Server,
)
from modpanel.services.daemon import FileRepository


DEFAULT_MODS_DIRECTORY = "mods"


def split_directory(path: str) -> Tuple[str, str]:
    """
    将目录路径拆分为 (名称, 父目录)

    "mods" -> ("mods", "/")，"config/mods" -> ("mods", "/config")
    """
    normalized = "/" + path.strip("/")
    parent, name = posixpath.split(normalized)
    if not name:
        raise DirectoryError("目录路径不能为空", context={"path": path})
    return name, parent or "/"


class DownloadOrchestrator:
    """下载编排器"""

    def __init__(
        self,
        repository: FileRepository,
        mods_directory: str = DEFAULT_MODS_DIRECTORY,
    ):
        self.repository = repository
        self.mods_directory = mods_directory

    def get_mods_directory(self, server: Server) -> str:
        """获取服务器的模组目录，Forge/Fabric/Quilt 都使用同一目录"""
        return self.mods_directory

    async def directory_state(self, server: Server, path: str) -> DirectoryState:
        """
        探测目录状态

        Returns:
            EXISTS 目录存在；MISSING 守护进程明确返回不存在；
            UNKNOWN 其他任何失败
        """
        self.repository.set_server(server)
        try:
            await self.repository.get_directory(path)
        except DaemonNotFoundError:
            return DirectoryState.MISSING
        except DaemonError as e:
            logger.debug(f"[目录] 探测 '{path}' 失败: {e}")
            return DirectoryState.UNKNOWN
        return DirectoryState.EXISTS

    async def ensure_directory(self, server: Server, path: str) -> None:
        """确保目录存在，不存在时创建；状态未知时抛出 DirectoryError"""
        state = await self.directory_state(server, path)
        if state == DirectoryState.EXISTS:
            return
        if state == DirectoryState.UNKNOWN:
            raise DirectoryError(
                f"无法确认目录 '{path}' 是否存在",
                context={"server": server.uuid, "path": path},
            )

        name, parent = split_directory(path)
        logger.info(f"[目录] 创建目录 '{path}'")
        try:
            await self.repository.create_directory(name, parent)
        except DaemonError as e:
            raise DirectoryError(
                f"创建目录 '{path}' 失败: {e.message}",
                context={"server": server.uuid, "path": path},
            ) from e

    async def download_one(
        self,
        server: Server,
        url: str,
        filename: str,
        directory: str = DEFAULT_MODS_DIRECTORY,
    ) -> None:
        """
        下载单个模组到服务器

        Raises:
            DownloadError: 目录准备或拉取失败
        """
        try:
            await self.ensure_directory(server, directory)
            self.repository.set_server(server)
            await self.repository.pull(url, directory, filename=filename, foreground=True)
        except Exception as e:
            message = e.message if isinstance(e, ModPanelError) else str(e)
            raise DownloadError(
                f"下载 '{filename}' 失败: {message}",
                context={"url": url, "filename": filename, "directory": directory},
            ) from e
        logger.success(f"[完成] '{filename}' 已拉取到 {directory}")

    async def download_many(
        self,
        server: Server,
        items: Iterable[DownloadItem],
        directory: str = DEFAULT_MODS_DIRECTORY,
    ) -> None:
        """
        按顺序下载多个模组

        第一个失败会中止剩余项目并向上抛出，已完成的下载不会回滚。
        """
        for item in items:
            await self.download_one(server, item.url, item.filename, directory)

    async def download(self, request: DownloadRequest) -> None:
        """执行一次下载请求"""
        await self.download_many(request.server, request.items, request.directory)

    async def close(self):
        await self.repository.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
