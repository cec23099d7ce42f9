"""遥测面板：HTTP 采集、通道路由与实时曲线。"""

__version__ = "0.1.0"
