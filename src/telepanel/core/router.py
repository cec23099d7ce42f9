"""把一轮采样分发到各图表，并找出没有被任何坐标轴引用的列。"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Sequence, Set, Tuple

from telepanel.core.plot import RealTimePlot


@dataclass
class RoutingReport:
    """单轮路由结果。"""

    appended: Dict[Tuple[str, str], int] = field(default_factory=dict)
    unknown_columns: List[str] = field(default_factory=list)

    @property
    def total_points(self) -> int:
        return sum(self.appended.values())


def format_unknown_columns(columns: Sequence[str]) -> str:
    return "Unknown column name: {" + ", ".join(columns) + "}"


class ColumnRouter:
    """按图表配置路由列数据。"""

    def __init__(self, plots: Sequence[RealTimePlot]) -> None:
        self._plots = list(plots)
        known: Set[str] = set()
        for plot in self._plots:
            known.update(plot.all_axis_names())
        self._known = frozenset(known)

    @property
    def known_columns(self) -> frozenset:
        return self._known

    def route(self, samples: Mapping[str, Sequence[float]]) -> RoutingReport:
        report = RoutingReport()
        for plot in self._plots:
            for column, count in plot.update_points(samples).items():
                report.appended[(plot.name, column)] = count
        report.unknown_columns = sorted(name for name in samples if name not in self._known)
        return report
