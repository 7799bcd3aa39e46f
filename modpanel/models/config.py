"""
配置模型

定义 Modrinth、守护进程和页面默认值的配置，并从字典构造。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from modpanel.exceptions import ConfigError
from modpanel.models.api import ModLoader


MODRINTH_BASE_URL = "https://api.modrinth.com/v2"
DEFAULT_USER_AGENT = "modpanel/0.1.0"


@dataclass
class ModrinthConfig:
    """Modrinth API 配置"""

    base_url: str = MODRINTH_BASE_URL
    timeout: float = 30.0
    user_agent: str = DEFAULT_USER_AGENT

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ModrinthConfig":
        return cls(
            base_url=str(data.get("base_url", MODRINTH_BASE_URL)).rstrip("/"),
            timeout=_positive(data, "timeout", 30.0, "modrinth"),
            user_agent=str(data.get("user_agent", DEFAULT_USER_AGENT)),
        )


@dataclass
class DaemonConfig:
    """文件管理守护进程配置"""

    url: str = "http://127.0.0.1:8080"
    token: Optional[str] = None
    timeout: float = 30.0
    pull_timeout: float = 60.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DaemonConfig":
        return cls(
            url=str(data.get("url", "http://127.0.0.1:8080")).rstrip("/"),
            token=data.get("token"),
            timeout=_positive(data, "timeout", 30.0, "daemon"),
            pull_timeout=_positive(data, "pull_timeout", 60.0, "daemon"),
        )


@dataclass
class DefaultsConfig:
    """页面默认过滤条件"""

    game_version: str = "1.20.1"
    loader: ModLoader = ModLoader.FORGE
    directory: str = "mods"
    limit: int = 20

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DefaultsConfig":
        loader = data.get("loader", ModLoader.FORGE.value)
        try:
            mod_loader = ModLoader(loader)
        except ValueError:
            raise ConfigError(
                "loader 必须为 forge/fabric/quilt",
                context={"loader": loader},
            )

        limit = data.get("limit", 20)
        if not isinstance(limit, int) or limit <= 0:
            raise ConfigError("limit 必须为正整数", context={"limit": limit})

        directory = str(data.get("directory", "mods")).strip()
        if not directory:
            raise ConfigError("directory 不能为空")

        return cls(
            game_version=str(data.get("game_version", "1.20.1")),
            loader=mod_loader,
            directory=directory,
            limit=limit,
        )


@dataclass
class PanelConfig:
    """ModPanel 总配置"""

    modrinth: ModrinthConfig = field(default_factory=ModrinthConfig)
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PanelConfig":
        """从配置字典构造，缺省的配置段使用默认值"""
        data = data or {}
        if not isinstance(data, dict):
            raise ConfigError("配置文件根节点必须是表/对象")

        return cls(
            modrinth=ModrinthConfig.from_dict(_section(data, "modrinth")),
            daemon=DaemonConfig.from_dict(_section(data, "daemon")),
            defaults=DefaultsConfig.from_dict(_section(data, "defaults")),
        )


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"配置段 [{name}] 必须是表/对象")
    return section


def _positive(data: Dict[str, Any], key: str, default: float, section: str) -> float:
    value = data.get(key, default)
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise ConfigError(
            f"[{section}] {key} 必须是数字", context={key: data.get(key)}
        )
    if value <= 0:
        raise ConfigError(f"[{section}] {key} 必须大于 0", context={key: value})
    return value
