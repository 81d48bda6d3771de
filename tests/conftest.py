"""Pytest 配置和 fixtures。"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent

# 添加 src 目录到 Python 路径
SRC_DIR = PROJECT_ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

# 测试用子进程脚本
FAKE_CLI = Path(__file__).parent / "fixtures" / "fake_cli.py"

from process_builder import ProcessBuilder, config  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_config():
    """每个测试前后重新加载全局配置。"""
    config.reload_config()
    yield
    config.reload_config()


@pytest.fixture
def temp_workspace(tmp_path: Path) -> Path:
    """临时工作目录。"""
    workspace = tmp_path / "workspace"
    workspace.mkdir()
    return workspace


@pytest.fixture
def fake_cli() -> ProcessBuilder:
    """运行 fake_cli.py 的 builder（使用当前解释器，跨平台）。"""
    return ProcessBuilder.create(sys.executable).add_argument(str(FAKE_CLI))


@pytest.fixture
def python() -> ProcessBuilder:
    """运行当前解释器的 builder。"""
    return ProcessBuilder.create(sys.executable)
