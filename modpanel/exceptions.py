"""
ModPanel 统一异常体系

提供分层的异常结构，支持错误代码、上下文信息和 JSON 序列化。
"""

from typing import Any, Dict, Optional


class ModPanelError(Exception):
    """ModPanel 基础异常类"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self._get_default_code()
        self.context = context or {}

    def _get_default_code(self) -> str:
        """获取默认错误代码"""
        return "E000"

    def to_dict(self) -> Dict[str, Any]:
        """将异常转换为字典格式"""
        return {
            "error": True,
            "code": self.code,
            "message": self.message,
            "context": self.context,
            "type": self.__class__.__name__,
        }

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ConfigError(ModPanelError):
    """配置相关错误"""

    def _get_default_code(self) -> str:
        return "E100"


class UpstreamError(ModPanelError):
    """模组仓库 API 请求失败（网络错误或非 2xx 响应）"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
        url: Optional[str] = None,
    ):
        super().__init__(message, code, context)
        self.status = status
        self.url = url
        if status is not None:
            self.context["status_code"] = status
        if url:
            self.context["url"] = url

    def _get_default_code(self) -> str:
        return "E200"


class DownloadError(ModPanelError):
    """下载相关错误"""

    def _get_default_code(self) -> str:
        return "E300"


class DirectoryError(DownloadError):
    """目标目录探测或创建失败"""

    def _get_default_code(self) -> str:
        return "E310"


class DaemonError(ModPanelError):
    """文件管理守护进程请求失败"""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        status: Optional[int] = None,
    ):
        super().__init__(message, code, context)
        self.status = status
        if status is not None:
            self.context["status_code"] = status

    def _get_default_code(self) -> str:
        return "E600"


class DaemonNotFoundError(DaemonError):
    """守护进程上的资源不存在"""

    def _get_default_code(self) -> str:
        return "E604"


__all__ = [
    "ModPanelError",
    "ConfigError",
    "UpstreamError",
    "DownloadError",
    "DirectoryError",
    "DaemonError",
    "DaemonNotFoundError",
]
