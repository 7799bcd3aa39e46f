"""
文件管理守护进程客户端

定义文件仓库接口，并提供基于守护进程 HTTP API 的实现：
列出目录、创建目录、从远程地址拉取文件。
"""

import asyncio
from abc import ABC, abstractmethod
from typing import List, Optional

import aiohttp
from loguru import logger

from modpanel.exceptions import DaemonError, DaemonNotFoundError
from modpanel.models import DaemonConfig, Server


class FileRepository(ABC):
    """
    服务器文件仓库接口

    所有操作都作用于 set_server 指定的服务器。
    """

    def __init__(self):
        self.server: Optional[Server] = None

    def set_server(self, server: Server) -> "FileRepository":
        self.server = server
        return self

    def _require_server(self) -> Server:
        if self.server is None:
            raise DaemonError("未指定目标服务器")
        return self.server

    @abstractmethod
    async def get_directory(self, path: str) -> List[dict]:
        """列出目录内容，目录不存在时抛出 DaemonNotFoundError"""
        pass

    @abstractmethod
    async def create_directory(self, name: str, path: str) -> None:
        """在 path 下创建名为 name 的目录"""
        pass

    @abstractmethod
    async def pull(
        self,
        url: str,
        directory: str,
        filename: Optional[str] = None,
        foreground: bool = True,
    ) -> None:
        """让守护进程从 url 拉取文件到 directory"""
        pass

    async def close(self):
        pass

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class DaemonFileRepository(FileRepository):
    """守护进程 HTTP API 文件仓库"""

    def __init__(
        self,
        config: Optional[DaemonConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        super().__init__()
        self.config = config or DaemonConfig()
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            headers = {"Accept": "application/json"}
            if self.config.token:
                headers["Authorization"] = f"Bearer {self.config.token}"
            self._session = aiohttp.ClientSession(headers=headers)
            self._owned_session = True
        return self._session

    def _url(self, action: str) -> str:
        server = self._require_server()
        return f"{self.config.url}/api/servers/{server.uuid}/files/{action}"

    async def _request(
        self,
        method: str,
        action: str,
        timeout: float,
        params: Optional[dict] = None,
        payload: Optional[dict] = None,
    ):
        url = self._url(action)
        logger.debug(f"[守护进程] {method} {url}")
        try:
            async with self.session.request(
                method,
                url,
                params=params,
                json=payload,
                timeout=aiohttp.ClientTimeout(total=timeout),
            ) as response:
                if 200 <= response.status < 300:
                    if response.status == 204:
                        return None
                    return await response.json(content_type=None)

                text = (await response.text()).strip()
                message = f"{action} 失败 (状态码: {response.status}): {text or response.reason}"
                if response.status == 404:
                    raise DaemonNotFoundError(message, status=response.status)
                raise DaemonError(message, status=response.status)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise DaemonError(f"{action} 失败: {str(e) or type(e).__name__}") from e
        except ValueError as e:
            raise DaemonError(f"{action} 失败: 无法解析响应 ({e})") from e

    async def get_directory(self, path: str) -> List[dict]:
        data = await self._request(
            "GET",
            "list-directory",
            self.config.timeout,
            params={"directory": _absolute(path)},
        )
        return data or []

    async def create_directory(self, name: str, path: str) -> None:
        await self._request(
            "POST",
            "create-directory",
            self.config.timeout,
            payload={"name": name, "path": _absolute(path)},
        )

    async def pull(
        self,
        url: str,
        directory: str,
        filename: Optional[str] = None,
        foreground: bool = True,
    ) -> None:
        payload = {
            "url": url,
            "root": _absolute(directory),
            "use_header": filename is None,
            "foreground": foreground,
        }
        if filename:
            payload["file_name"] = filename
        await self._request("POST", "pull", self.config.pull_timeout, payload=payload)

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()


def _absolute(path: str) -> str:
    return "/" + path.strip("/")
