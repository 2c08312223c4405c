"""统一异常体系

所有业务异常继承 AssetKitError，每个子类带一个 code。
CLI 层据此输出友好提示，Web 层据此映射 HTTP 状态码。
"""

from __future__ import annotations


class AssetKitError(Exception):
    """基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(AssetKitError):
    """配置文件缺失或内容无效"""

    code = "CONFIG_ERROR"


class ValidationError(AssetKitError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class LibraryNotFoundError(AssetKitError):
    """注册表中不存在该库"""

    code = "LIBRARY_NOT_FOUND"


class RegistryUnavailableError(AssetKitError):
    """注册表请求失败（网络错误或响应无法解析）"""

    code = "REGISTRY_UNAVAILABLE"


class UnknownVersionError(AssetKitError):
    """目标版本不在注册表的版本列表中"""

    code = "UNKNOWN_VERSION"


class NoAssetsMatchedError(AssetKitError):
    """当前配置下没有可安装的资源"""

    code = "NO_ASSETS_MATCHED"


class NotInstalledError(AssetKitError):
    """依赖尚未安装"""

    code = "NOT_INSTALLED"


class AlreadyAtVersionError(AssetKitError):
    """目标版本与当前已安装版本相同"""

    code = "ALREADY_AT_VERSION"


class PartialDownloadError(AssetKitError):
    """部分资源下载失败

    failed 记录 {url: 失败原因}，succeeded 记录已成功写入的文件路径。
    已成功的文件保留在原处，不做回滚。
    """

    code = "PARTIAL_DOWNLOAD"

    def __init__(
        self,
        message: str,
        failed: dict[str, str] | None = None,
        succeeded: list[str] | None = None,
    ) -> None:
        super().__init__(message)
        self.failed = failed or {}
        self.succeeded = succeeded or []
