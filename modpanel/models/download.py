"""
下载数据模型

定义目标服务器、下载项、下载请求和目录状态。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class DirectoryState(Enum):
    """目录探测结果"""

    EXISTS = "exists"
    MISSING = "missing"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Server:
    """受管游戏服务器"""

    uuid: str
    name: str = ""


@dataclass(frozen=True)
class DownloadItem:
    """单个待拉取文件"""

    url: str
    filename: str


@dataclass
class DownloadRequest:
    """一次用户操作产生的下载请求，不做持久化"""

    server: Server
    items: List[DownloadItem] = field(default_factory=list)
    directory: str = "mods"
