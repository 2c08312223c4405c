"""网络工具: URL 校验与路径拆解"""

from __future__ import annotations

import posixpath
from urllib.parse import urlparse

from assetkit.core.exceptions import ValidationError

_ALLOWED_SCHEMES = frozenset(("http", "https"))


def validate_url_scheme(url: str, *, context: str = "") -> None:
    """仅允许 http/https，拒绝 file:// 等协议

    Raises:
        ValidationError: scheme 不在白名单内
    """
    scheme = urlparse(url).scheme
    if scheme not in _ALLOWED_SCHEMES:
        label = f" ({context})" if context else ""
        raise ValidationError(
            f"不允许的 URL 协议 '{scheme}'{label}，仅支持 http/https: {url}"
        )


def url_basename(url: str) -> str:
    """URL 路径的最后一段: ".../dist/js/app.min.js" -> "app.min.js" """
    return posixpath.basename(urlparse(url).path.rstrip("/"))


def url_extension(url: str) -> str:
    """URL 文件扩展名（不含点），无扩展名返回空串"""
    _, ext = posixpath.splitext(url_basename(url))
    return ext.lstrip(".")
