"""注册表访问模块

拆分说明:
- tree.py: 文件树形态识别，统一为 FileTree
- client.py: 版本列表 / 文件树查询
"""

from assetkit.core.registry.client import RegistryClient, VersionInfo, http_get_json
from assetkit.core.registry.tree import detect_shape, parse_file_tree

__all__ = [
    "RegistryClient",
    "VersionInfo",
    "http_get_json",
    "detect_shape",
    "parse_file_tree",
]
