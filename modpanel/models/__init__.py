"""
ModPanel 数据模型包

包含配置模型、API 模型、下载模型和页面模型定义。
"""

from modpanel.models.config import (
    ModrinthConfig,
    DaemonConfig,
    DefaultsConfig,
    PanelConfig,
)
from modpanel.models.api import (
    ModLoader,
    SearchQuery,
    ModSummary,
    FileInfo,
    ModVersion,
    ProjectInfo,
)
from modpanel.models.download import (
    DirectoryState,
    Server,
    DownloadItem,
    DownloadRequest,
)
from modpanel.models.page import (
    Outcome,
    NotificationStatus,
    Notification,
)

__all__ = [
    # 配置模型
    "ModrinthConfig",
    "DaemonConfig",
    "DefaultsConfig",
    "PanelConfig",
    # API 模型
    "ModLoader",
    "SearchQuery",
    "ModSummary",
    "FileInfo",
    "ModVersion",
    "ProjectInfo",
    # 下载模型
    "DirectoryState",
    "Server",
    "DownloadItem",
    "DownloadRequest",
    # 页面模型
    "Outcome",
    "NotificationStatus",
    "Notification",
]
