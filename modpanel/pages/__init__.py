"""
ModPanel 页面层
"""

from modpanel.pages.mods import ModsPage, GAME_VERSIONS, LOADERS

__all__ = ["ModsPage", "GAME_VERSIONS", "LOADERS"]
