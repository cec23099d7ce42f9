"""核心数据流：通道、解析、路由与曲线缓存。"""

from .channel import RecordReceiver, RecordSender, SenderSlot, create_channel
from .log_sink import LogEntry, LogSink
from .parser import SampleSetBuilder, parse_values
from .plot import RealTimePlot
from .router import ColumnRouter, RoutingReport
from .series_buffer import SeriesBuffer

__all__ = [
    "ColumnRouter",
    "LogEntry",
    "LogSink",
    "RealTimePlot",
    "RecordReceiver",
    "RecordSender",
    "RoutingReport",
    "SampleSetBuilder",
    "SenderSlot",
    "SeriesBuffer",
    "create_channel",
    "parse_values",
]
