"""采集服务与桌面绘图窗口。"""

from .server import create_app

__all__ = ["create_app"]
