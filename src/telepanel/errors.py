"""统一的异常类型。"""

from __future__ import annotations


class TelepanelError(Exception):
    """所有自定义异常的基类。"""


class ConfigError(TelepanelError):
    """配置文件无法读取或校验失败，启动阶段视为致命错误。"""


class IngestError(TelepanelError):
    """采集请求无法投递到路由通道。"""


class ChannelNotReady(IngestError):
    """发送端尚未安装。"""

    def __init__(self) -> None:
        super().__init__("not ready: no sender is installed, can't send query to dashboard")


class ChannelClosed(IngestError):
    """接收端已关闭。"""

    def __init__(self) -> None:
        super().__init__("channel closed: receiver was dropped by dashboard")


class ParseError(TelepanelError):
    """数值字段中出现无法解析的片段。"""

    def __init__(self, token: str, cause: ValueError) -> None:
        super().__init__(f"invalid float literal {token!r}: {cause}")
        self.token = token
        self.cause = cause
