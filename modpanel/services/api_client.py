"""
API 客户端

Modrinth 模组仓库的 REST 客户端：搜索、获取版本列表、解析下载地址。
"""

import asyncio
import json
from typing import Iterable, List, Optional

import aiohttp
from loguru import logger

from modpanel.exceptions import UpstreamError
from modpanel.models import ModrinthConfig, ModSummary, ModVersion, ProjectInfo, SearchQuery


DEFAULT_FACETS = '[["categories:minecraft"]]'


def build_facets(query: SearchQuery) -> str:
    """
    构造搜索 facet 表达式

    显式给出的 versions 会替换默认分类 facet，否则使用 query.facets 或默认值。
    """
    if query.versions:
        return json.dumps(
            [[f"versions:{version}" for version in query.versions]],
            separators=(",", ":"),
        )
    return query.facets or DEFAULT_FACETS


class ModrinthClient:
    """Modrinth API 客户端"""

    def __init__(
        self,
        config: Optional[ModrinthConfig] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.config = config or ModrinthConfig()
        self._session = session
        self._owned_session = session is None

    @property
    def session(self) -> aiohttp.ClientSession:
        """获取或创建 aiohttp session"""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.config.timeout),
                headers={"User-Agent": self.config.user_agent},
            )
            self._owned_session = True
        return self._session

    async def _request(
        self,
        endpoint: str,
        params: Optional[dict] = None,
        action: str = "请求",
        expected: type = dict,
    ):
        """
        发送 API 请求，失败时抛出 UpstreamError

        expected 为响应体应有的 JSON 类型 (dict 或 list)，空响应体视为该类型的空值。
        """
        url = f"{self.config.base_url}{endpoint}"
        logger.debug(f"[API] GET {url} {params or ''}")
        try:
            async with self.session.get(url, params=params) as response:
                if not 200 <= response.status < 300:
                    message = await self._error_message(response)
                    raise UpstreamError(
                        f"{action}失败: {message}",
                        status=response.status,
                        url=str(response.url),
                    )
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise UpstreamError(
                f"{action}失败: {str(e) or type(e).__name__}", url=url
            ) from e
        except ValueError as e:
            raise UpstreamError(f"{action}失败: 无法解析响应 ({e})", url=url) from e

        if data is None:
            return expected()
        if not isinstance(data, expected):
            raise UpstreamError(
                f"{action}失败: 响应格式错误 (应为 {expected.__name__}，实际为 {type(data).__name__})",
                url=url,
            )
        return data

    @staticmethod
    async def _error_message(response: aiohttp.ClientResponse) -> str:
        """提取上游错误信息"""
        text = await response.text()
        try:
            body = json.loads(text)
        except ValueError:
            body = None
        if isinstance(body, dict):
            detail = body.get("description") or body.get("error")
            if detail:
                return f"{detail} (状态码: {response.status})"
        return f"{text.strip() or response.reason} (状态码: {response.status})"

    async def search(self, query: SearchQuery) -> List[ModSummary]:
        """
        搜索模组

        Args:
            query: 搜索条件

        Returns:
            搜索结果，长度不超过 query.limit
        """
        params = {
            "query": query.query,
            "limit": query.limit,
            "offset": query.offset,
            "facets": build_facets(query),
        }
        data = await self._request("/search", params, action="搜索模组")
        hits = data.get("hits") or []
        return [ModSummary.from_modrinth(hit) for hit in hits[: query.limit]]

    async def get_project(self, mod_id: str) -> ProjectInfo:
        """获取项目信息"""
        data = await self._request(f"/project/{mod_id}", action="获取模组详情")
        return ProjectInfo.from_modrinth(data)

    async def get_versions(
        self,
        mod_id: str,
        loaders: Optional[Iterable[str]] = None,
        game_versions: Optional[Iterable[str]] = None,
    ) -> List[ModVersion]:
        """
        获取模组版本列表

        保持 API 返回的顺序，第一个元素即为最新版本。

        Args:
            mod_id: 模组 ID 或 slug
            loaders: 加载器过滤
            game_versions: 游戏版本过滤

        Returns:
            版本列表
        """
        params = {}
        if loaders:
            params["loaders"] = json.dumps(sorted(set(loaders)))
        if game_versions:
            params["game_versions"] = json.dumps(sorted(set(game_versions)))

        data = await self._request(
            f"/project/{mod_id}/version", params, action="获取模组版本", expected=list
        )
        return [ModVersion.from_modrinth(version) for version in data]

    async def resolve_download_url(self, version_id: str) -> str:
        """
        获取版本第一个文件的下载地址

        Returns:
            下载地址，版本没有文件时返回空字符串
        """
        data = await self._request(f"/version/{version_id}", action="获取下载地址")
        files = data.get("files") or []
        if not files:
            return ""
        return files[0].get("url", "")

    async def close(self):
        """关闭客户端"""
        if self._owned_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        """异步上下文管理器入口"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """异步上下文管理器出口"""
        await self.close()
