"""process-builder 异常类。

process-builder core v0.1.0
"""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "ProcessBuilderError",
    "SpawnError",
    "ExitCodeError",
]


class ProcessBuilderError(Exception):
    """process-builder 基础异常。"""
    pass


class SpawnError(ProcessBuilderError):
    """子进程无法创建（路径不存在、无执行权限、工作目录无效等）。

    Attributes:
        program: 要执行的程序
        arguments: 参数列表
    """

    def __init__(self, program: str, arguments: Sequence[str], reason: str) -> None:
        self.program = program
        self.arguments = tuple(arguments)
        super().__init__(f"Failed to start process '{program}': {reason}")


class ExitCodeError(ProcessBuilderError):
    """子进程运行结束但返回非零退出码。

    Attributes:
        program: 执行的程序
        arguments: 参数字符串（以空格连接）
        exit_code: 观察到的退出码
    """

    def __init__(self, program: str, arguments: str, exit_code: int) -> None:
        self.program = program
        self.arguments = arguments
        self.exit_code = exit_code
        command = f"{program} {arguments}" if arguments else program
        super().__init__(
            f"Process '{command}' exited with non-zero exit code: {exit_code}"
        )
