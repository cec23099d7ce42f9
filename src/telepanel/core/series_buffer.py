"""单条曲线的点序列缓存。"""

from __future__ import annotations

from typing import Iterable, List, Tuple

Point = Tuple[float, float]

ZERO_POINT: Point = (0.0, 0.0)


class SeriesBuffer:
    """只追加的二维点序列，并缓存最后一个点。

    缓冲区本身不做窗口裁剪，显示多少点由绘图端决定。
    """

    def __init__(self) -> None:
        self._points: List[Point] = []
        self._latest: Point = ZERO_POINT

    def append(self, points: Iterable[Point]) -> int:
        """追加一批点，返回实际追加的数量。"""

        batch = [(float(x), float(y)) for x, y in points]
        if batch:
            self._points.extend(batch)
            self._latest = batch[-1]
        return len(batch)

    def reset(self) -> None:
        self._points = []
        self._latest = ZERO_POINT

    @property
    def latest(self) -> Point:
        return self._latest

    def points(self, start: int = 0) -> List[Point]:
        """返回从 ``start`` 起的点序列拷贝。"""

        return self._points[start:]

    def __len__(self) -> int:
        return len(self._points)
