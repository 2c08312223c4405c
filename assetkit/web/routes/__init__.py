"""Web 路由模块 - Blueprint 集合"""

from assetkit.web.routes.deps_bp import deps_bp

__all__ = ["deps_bp"]
