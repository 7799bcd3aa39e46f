"""
界面文案

模组页面使用的英文文案，按点号分隔的键查找。
"""

MESSAGES = {
    "title": "Mods",
    "search": {
        "title": "Search Mods",
        "description": "Search for Minecraft mods on Modrinth",
        "query": "Search",
        "placeholder": "Enter mod name...",
        "version": "Minecraft Version",
        "loader": "Mod Loader",
        "results": "Search Results",
        "select": "Select mods to download",
        "failed": "Search Failed",
        "no_results": "No mods found",
        "no_results_body": "No mods match your search. Try a different name, version or loader.",
    },
    "download": {
        "title": "Download",
        "description": "Download selected mods to your server",
        "action": "Download Selected Mods",
        "started": "Download Started",
        "body": "Mods are being downloaded to your server.",
        "failed": "Download Failed",
        "no_selection": "No Mods Selected",
        "no_selection_body": "Please select at least one mod to download.",
        "no_versions": "No Compatible Versions",
        "no_versions_body": "No compatible versions found for the selected mods and loader.",
    },
}


def trans(key: str) -> str:
    """按点号键查找文案，找不到时原样返回键"""
    node = MESSAGES
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return key
        node = node[part]
    return node if isinstance(node, str) else key
