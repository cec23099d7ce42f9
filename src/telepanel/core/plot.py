"""单个图表：一个 x 轴列，多个 y 轴列，每个 y 轴一条曲线。"""

from __future__ import annotations

from typing import Dict, List, Mapping, Sequence, Tuple

from telepanel.core.series_buffer import Point, SeriesBuffer


class RealTimePlot:
    """按配置持有若干 ``SeriesBuffer``，单 y 轴只是多 y 轴的特例。"""

    def __init__(self, name: str, x_axis: str, y_axis: Sequence[str]) -> None:
        self.name = name
        self.x_axis = x_axis
        self.y_axis: Tuple[str, ...] = tuple(y_axis)
        self._series: Dict[str, SeriesBuffer] = {column: SeriesBuffer() for column in self.y_axis}

    def series(self, column: str) -> SeriesBuffer:
        return self._series[column]

    def all_axis_names(self) -> List[str]:
        return [self.x_axis, *self.y_axis]

    def update_points(self, samples: Mapping[str, Sequence[float]]) -> Dict[str, int]:
        """把本轮采样按下标配对后追加到对应曲线，返回每条曲线新增的点数。

        x、y 长度不等时按较短者截断。
        """

        appended: Dict[str, int] = {}
        new_x = samples.get(self.x_axis)
        if new_x is None:
            return appended
        for column in self.y_axis:
            new_y = samples.get(column)
            if new_y is None:
                continue
            points: List[Point] = list(zip(new_x, new_y))
            appended[column] = self._series[column].append(points)
        return appended

    def reset(self) -> None:
        for buffer in self._series.values():
            buffer.reset()

    def snapshot(self) -> Dict[str, Tuple[List[Point], Point]]:
        """供绘图端读取：曲线名 -> (点序列, 最新点)。"""

        return {column: (buffer.points(), buffer.latest) for column, buffer in self._series.items()}
