"""
API 数据模型

定义模组仓库 API 相关的数据类，包括搜索条件、搜索结果、项目信息、版本信息等。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, List, Dict, Tuple


class ModLoader(Enum):
    """模组加载器"""

    FORGE = "forge"
    FABRIC = "fabric"
    QUILT = "quilt"


@dataclass(frozen=True)
class SearchQuery:
    """
    一次搜索的查询条件。

    game_version / loader 是页面当前选择的过滤条件，用于后续版本解析；
    只有显式给出 versions 时才会替换默认的分类 facet。
    """

    query: str
    game_version: Optional[str] = None
    loader: Optional[ModLoader] = None
    limit: int = 20
    offset: int = 0
    versions: Optional[Tuple[str, ...]] = None
    facets: Optional[str] = None


@dataclass
class ModSummary:
    """搜索结果中的单个模组"""

    mod_id: str
    title: str
    description: str
    slug: Optional[str] = None
    project_id: Optional[str] = None
    downloads: int = 0

    @property
    def label(self) -> str:
        """渲染为可选项标签"""
        return f"{self.title} - {self.description}"

    @classmethod
    def from_modrinth(cls, hit: dict) -> "ModSummary":
        """
        将 Modrinth 搜索结果中的 hit 转换为 ModSummary 对象。
        """
        project_id = hit.get("project_id")
        return cls(
            mod_id=hit.get("mod_id") or project_id or "",
            title=hit.get("title", ""),
            description=hit.get("description", ""),
            slug=hit.get("slug"),
            project_id=project_id,
            downloads=hit.get("downloads", 0),
        )


@dataclass
class FileInfo:
    """文件信息"""

    url: str
    filename: str
    size: int = 0
    primary: bool = False
    hashes: Optional[Dict[str, str]] = None

    @classmethod
    def from_modrinth(cls, data: dict) -> "FileInfo":
        return cls(
            url=data.get("url", ""),
            filename=data.get("filename", ""),
            size=data.get("size", 0),
            primary=data.get("primary", False),
            hashes=data.get("hashes"),
        )


@dataclass
class ModVersion:
    """
    模组版本信息。

    files 保持 API 返回的顺序，第一个文件视为该版本的下载文件。
    """

    id: str
    name: str = ""
    version_number: str = ""
    files: List[FileInfo] = field(default_factory=list)
    loaders: List[str] = field(default_factory=list)
    game_versions: List[str] = field(default_factory=list)

    @property
    def primary_file(self) -> Optional[FileInfo]:
        """第一个文件（没有文件时为 None）"""
        if not self.files:
            return None
        return self.files[0]

    @classmethod
    def from_modrinth(cls, data: dict) -> "ModVersion":
        """
        将 Modrinth API 返回的版本信息转换为 ModVersion 对象。
        """
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            version_number=data.get("version_number", ""),
            files=[FileInfo.from_modrinth(file) for file in data.get("files", [])],
            loaders=list(data.get("loaders", [])),
            game_versions=list(data.get("game_versions", [])),
        )


@dataclass
class ProjectInfo:
    """
    模组项目信息。
    """

    id: str
    slug: str
    title: str
    description: str
    project_type: str
    versions: List[str] = field(default_factory=list)

    @classmethod
    def from_modrinth(cls, data: dict) -> "ProjectInfo":
        return cls(
            id=data.get("id", ""),
            slug=data.get("slug", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            project_type=data.get("project_type", "mod"),
            versions=list(data.get("versions", [])),
        )
