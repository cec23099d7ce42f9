"""面板消费循环：每帧排空通道、解析并路由到各图表。"""

from __future__ import annotations

import logging
from typing import List, Optional

from telepanel.config import DashboardConfig
from telepanel.core.channel import RecordReceiver
from telepanel.core.log_sink import LogSink
from telepanel.core.parser import SampleSetBuilder
from telepanel.core.plot import RealTimePlot
from telepanel.core.router import ColumnRouter, format_unknown_columns

logger = logging.getLogger(__name__)


class Dashboard:
    """独占所有曲线缓存与日志，只在渲染线程中调用。"""

    def __init__(self, config: DashboardConfig, receiver: Optional[RecordReceiver] = None) -> None:
        self.config = config
        self.plots: List[RealTimePlot] = [
            RealTimePlot(plot.name, plot.x_axis, plot.y_axis) for plot in config.plots
        ]
        self.logs = LogSink(capacity=config.log_capacity)
        self._router = ColumnRouter(self.plots)
        self._receiver = receiver
        self.logs.append(f"Loaded config, port={config.port}: {config.summary()}")

    def set_receiver(self, receiver: RecordReceiver) -> None:
        self._receiver = receiver

    def plot(self, name: str) -> RealTimePlot:
        for plot in self.plots:
            if plot.name == name:
                return plot
        raise KeyError(name)

    def append_log(self, message: str) -> None:
        self.logs.append(message)

    def tick(self) -> int:
        """执行一轮消费，返回本轮解析出的采样数量。"""

        if self._receiver is None:
            self.logs.append("no channel is found")
            return 0

        records = self._receiver.drain()
        if not records:
            return 0

        builder = SampleSetBuilder()
        for record in records:
            builder.add_record(record)

        for column, error in builder.errors:
            message = f"Failed to parse column {column!r}: {error}"
            logger.warning(message)
            self.logs.append(message)

        report = self._router.route(builder.samples)
        if report.unknown_columns:
            message = format_unknown_columns(report.unknown_columns)
            logger.warning(message)
            self.logs.append(message)

        logger.debug(
            "消费 %d 条记录，解析 %d 个采样，追加 %d 个点",
            len(records),
            builder.sample_count,
            report.total_points,
        )
        return builder.sample_count

    def reset(self) -> None:
        """清空全部曲线数据。"""

        for plot in self.plots:
            plot.reset()
        logger.info("已清空全部曲线数据")

    def close(self) -> None:
        """关闭接收端，之后的采集请求会以 channel closed 失败。"""

        if self._receiver is not None:
            self._receiver.close()
