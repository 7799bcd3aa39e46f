"""
ModPanel 服务层

包含业务逻辑服务：模组仓库 API 客户端、文件管理守护进程客户端、下载编排。
"""

from modpanel.services.api_client import ModrinthClient
from modpanel.services.daemon import FileRepository, DaemonFileRepository
from modpanel.services.download import DownloadOrchestrator

__all__ = [
    "ModrinthClient",
    "FileRepository",
    "DaemonFileRepository",
    "DownloadOrchestrator",
]
