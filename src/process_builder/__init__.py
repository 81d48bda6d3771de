"""process-builder - 流式配置并运行外部子进程。

环境变量:
    DOTNET_HOST_PATH: dotnet() 使用的可执行文件
    PROCESS_BUILDER_LOG_COMMANDS: 以 INFO 级别记录启动的命令行 (默认 false)

用法:
    from process_builder import ProcessBuilder

    output = ProcessBuilder.create("echo").add_argument("hello").run_and_capture_output()
"""

__version__ = "0.1.0"

from .builder import ProcessBuilder, ProcessSpec, create, dotnet
from .errors import ExitCodeError, ProcessBuilderError, SpawnError
from .forwarders import (
    ConsoleOutputForwarder,
    LoggingOutputForwarder,
    OutputForwarder,
    OutputLine,
    OutputStream,
    RecordingOutputForwarder,
)

__all__ = [
    "__version__",
    "ProcessBuilder",
    "ProcessSpec",
    "create",
    "dotnet",
    "ProcessBuilderError",
    "SpawnError",
    "ExitCodeError",
    "OutputForwarder",
    "OutputStream",
    "OutputLine",
    "LoggingOutputForwarder",
    "ConsoleOutputForwarder",
    "RecordingOutputForwarder",
]
