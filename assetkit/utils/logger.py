"""assetkit 日志配置

日志输出到 stderr，stdout 留给命令输出（描述符 YAML 可以直接重定向保存）。
级别只作用于 assetkit 命名空间，第三方库（urllib3、werkzeug 等）保持 WARNING，
避免 DEBUG 时被请求日志淹没。

环境变量:
    ASSETKIT_LOG_LEVEL  DEBUG / INFO / WARNING ...（默认 INFO）
    ASSETKIT_LOG_JSON   为 1 时每行输出一条 JSON，便于 CI 采集
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

PACKAGE_LOGGER = "assetkit"
LEVEL_ENV = "ASSETKIT_LOG_LEVEL"
JSON_ENV = "ASSETKIT_LOG_JSON"

TEXT_FORMAT = "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            # record.created 是事件发生时间，不是格式化时间
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        # 库名、日志消息含中文，保持原样输出
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "INFO", json_output: bool = False) -> None:
    """配置日志

    参数:
        level: assetkit 日志级别，无法识别时回退 INFO
        json_output: True 时使用 JSONFormatter

    重复调用会先清理上一次的 handler，不会重复输出。
    """
    reset_logging()
    root = logging.getLogger()
    root.setLevel(logging.WARNING)
    logging.getLogger(PACKAGE_LOGGER).setLevel(
        getattr(logging, level.upper(), logging.INFO),
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if json_output else logging.Formatter(TEXT_FORMAT))
    root.addHandler(handler)


def setup_logging_from_env() -> None:
    setup_logging(
        level=os.getenv(LEVEL_ENV, "INFO"),
        json_output=os.getenv(JSON_ENV, "") == "1",
    )


def reset_logging() -> None:
    """清理根日志器 handler 并恢复 assetkit 级别（测试中重新配置时使用）"""
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    logging.getLogger(PACKAGE_LOGGER).setLevel(logging.NOTSET)
