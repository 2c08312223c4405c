"""assetkit - 前端资源依赖管理

从 npm 注册表（jsDelivr）查询库版本与文件树，按构建配置筛选脚本/样式表，
安装到宿主项目的存储目录（或记录 CDN 引用），并支持升级/降级已安装版本。
"""

__version__ = "0.3.0"
