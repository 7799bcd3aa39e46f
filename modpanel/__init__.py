"""
ModPanel - 在受管游戏服务器上搜索并安装 Modrinth 模组
"""

__version__ = "0.1.0"
