"""
页面数据模型

定义页面操作的结果和面向用户的通知。
"""

from dataclasses import dataclass
from enum import Enum


class Outcome(Enum):
    """页面操作结果"""

    SUCCESS = "success"
    FAILED = "failed"
    NO_SELECTION = "no_selection"
    NO_VERSIONS = "no_versions"


class NotificationStatus(Enum):
    SUCCESS = "success"
    WARNING = "warning"
    DANGER = "danger"


@dataclass
class Notification:
    """发送给用户的通知"""

    title: str
    body: str
    status: NotificationStatus
