"""process-builder 环境变量配置管理。

环境变量:
    DOTNET_HOST_PATH: dotnet 可执行文件路径
        - 未设置 = Windows 上使用 "dotnet.exe"，其他系统使用 "dotnet"

    PROCESS_BUILDER_LOG_COMMANDS: 是否以 INFO 级别记录每次启动的完整命令行
        - true/1/yes/on = 开启
        - false/0/no/off = 关闭 (默认，仅 DEBUG 级别记录)
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass

__all__ = [
    "Config",
    "load_config",
    "get_config",
    "reload_config",
    "DOTNET_HOST_PATH_ENV",
    "LOG_COMMANDS_ENV",
]

DOTNET_HOST_PATH_ENV = "DOTNET_HOST_PATH"
LOG_COMMANDS_ENV = "PROCESS_BUILDER_LOG_COMMANDS"


def _fallback_dotnet_executable() -> str:
    """当前平台的默认 dotnet 可执行文件名。"""
    return "dotnet.exe" if sys.platform == "win32" else "dotnet"


def _parse_bool(value: str | None, default: bool = False) -> bool:
    """解析布尔值环境变量。"""
    if value is None:
        return default
    return value.strip().lower() in ("true", "1", "yes", "on")


def _parse_path(value: str | None) -> str | None:
    """解析路径环境变量，空字符串视为未设置。"""
    if value is None or not value.strip():
        return None
    return value


@dataclass(frozen=True)
class Config:
    """process-builder 配置。

    Attributes:
        dotnet_host_path: DOTNET_HOST_PATH 的值（未设置为 None）
        log_commands: 是否以 INFO 级别记录启动的命令行
    """

    dotnet_host_path: str | None = None
    log_commands: bool = False

    @property
    def dotnet_executable(self) -> str:
        """dotnet 可执行文件，未配置时回退到平台默认名称。"""
        return self.dotnet_host_path or _fallback_dotnet_executable()


def load_config() -> Config:
    """从环境变量加载配置。"""
    return Config(
        dotnet_host_path=_parse_path(os.environ.get(DOTNET_HOST_PATH_ENV)),
        log_commands=_parse_bool(os.environ.get(LOG_COMMANDS_ENV), default=False),
    )


# 全局配置实例（延迟加载）
_config: Config | None = None


def get_config() -> Config:
    """获取全局配置实例。"""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> Config:
    """重新加载配置（用于测试）。"""
    global _config
    _config = load_config()
    return _config
