"""基于 matplotlib 的实时曲线窗口，每帧驱动一次面板消费。"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.animation import FuncAnimation
from matplotlib.axes import Axes
from matplotlib.figure import Figure
from matplotlib.lines import Line2D
from matplotlib.text import Text
from matplotlib.widgets import Button

from telepanel.core.log_sink import LogEntry
from telepanel.service import Dashboard

logger = logging.getLogger(__name__)

GRID_ROWS = 2
GRID_COLS = 3
DISPLAY_CAP = 10_000
DISPLAY_THRESHOLD = 100_000
LOG_LINES = 40

PANEL_PLOTS = "plots"
PANEL_LOGS = "logs"

def visible_start(length: int, cap: int = DISPLAY_CAP, threshold: int = DISPLAY_THRESHOLD) -> int:
    """点数超过阈值时只显示最近的 ``cap`` 个点，返回起始下标。"""

    if length < threshold:
        return 0
    return max(0, length - cap)


def format_log_lines(entries: Sequence[LogEntry], limit: int = LOG_LINES) -> List[str]:
    lines = []
    for entry in entries[:limit]:
        stamp = entry.timestamp.strftime("%H:%M:%S.%f")[:-3]
        lines.append(f"{stamp}  {entry.message}")
    return lines


class PlotWindow:
    """2x3 网格的曲线面板与日志面板，可切换。"""

    def __init__(self, dashboard: Dashboard, title: str = "Telemetry Panel") -> None:
        self._dashboard = dashboard
        self._title = title
        self._panel = PANEL_PLOTS
        self._fig: Optional[Figure] = None
        self._plot_axes: List[Axes] = []
        self._lines: Dict[Tuple[int, str], Tuple[Line2D, Line2D]] = {}
        self._log_ax: Optional[Axes] = None
        self._log_text: Optional[Text] = None
        self._buttons: List[Button] = []
        self._ani: Optional[FuncAnimation] = None

    @property
    def panel(self) -> str:
        return self._panel

    def build(self) -> Figure:
        fig, axes = plt.subplots(GRID_ROWS, GRID_COLS, figsize=(12, 8))
        if fig.canvas.manager is not None:
            fig.canvas.manager.set_window_title(self._title)
        fig.subplots_adjust(top=0.88, hspace=0.35, wspace=0.3)
        self._fig = fig
        self._plot_axes = list(np.ravel(axes))

        for idx, ax in enumerate(self._plot_axes):
            if idx >= len(self._dashboard.plots):
                ax.set_visible(False)
                continue
            plot = self._dashboard.plots[idx]
            ax.set_title(plot.name)
            ax.set_xlabel(plot.x_axis)
            for column in plot.y_axis:
                (line,) = ax.plot([], [], label=column)
                (marker,) = ax.plot([], [], marker="x", markersize=10, linestyle="none", color=line.get_color())
                self._lines[(idx, column)] = (line, marker)
            ax.legend(loc="lower left")

        self._log_ax = fig.add_axes([0.05, 0.05, 0.9, 0.8])
        self._log_ax.set_axis_off()
        self._log_text = self._log_ax.text(0.0, 1.0, "", va="top", ha="left", family="monospace", fontsize=9)
        self._log_ax.set_visible(False)

        self._add_button([0.05, 0.93, 0.08, 0.04], PANEL_PLOTS, lambda _event: self.show_panel(PANEL_PLOTS))
        self._add_button([0.14, 0.93, 0.08, 0.04], PANEL_LOGS, lambda _event: self.show_panel(PANEL_LOGS))
        self._add_button([0.26, 0.93, 0.08, 0.04], "reset", lambda _event: self._on_reset())

        interval_ms = max(1, int(1000 / self._dashboard.config.frame_rate))
        self._ani = FuncAnimation(fig, self._on_frame, interval=interval_ms, blit=False, cache_frame_data=False)
        return fig

    def _add_button(self, rect: List[float], label: str, callback) -> None:
        assert self._fig is not None
        button = Button(ax=self._fig.add_axes(rect), label=label)
        button.on_clicked(callback)
        self._buttons.append(button)

    def _on_reset(self) -> None:
        self._dashboard.reset()
        self.refresh()

    def _on_frame(self, _frame) -> None:
        self._dashboard.tick()
        self.refresh()

    def show_panel(self, panel: str) -> None:
        if panel not in (PANEL_PLOTS, PANEL_LOGS):
            raise ValueError(f"unknown panel {panel!r}")
        self._panel = panel
        showing_plots = panel == PANEL_PLOTS
        for idx, ax in enumerate(self._plot_axes):
            ax.set_visible(showing_plots and idx < len(self._dashboard.plots))
        if self._log_ax is not None:
            self._log_ax.set_visible(not showing_plots)
        self.refresh()

    def refresh(self) -> None:
        if self._fig is None:
            return
        if self._panel == PANEL_LOGS:
            if self._log_text is not None:
                self._log_text.set_text("\n".join(format_log_lines(self._dashboard.logs.newest_first())))
        else:
            for idx, plot in enumerate(self._dashboard.plots[: len(self._plot_axes)]):
                for column in plot.y_axis:
                    buffer = plot.series(column)
                    line, marker = self._lines[(idx, column)]
                    window = buffer.points(visible_start(len(buffer)))
                    data = np.asarray(window, dtype=float).reshape(-1, 2)
                    line.set_data(data[:, 0], data[:, 1])
                    latest = buffer.latest
                    marker.set_data([latest[0]], [latest[1]])
                ax = self._plot_axes[idx]
                ax.relim()
                ax.autoscale_view()
        self._fig.canvas.draw_idle()

    def run(self) -> None:
        """阻塞运行窗口，直到用户关闭。"""

        self.build()
        logger.info("绘图窗口已启动，帧率上限 %.0f", self._dashboard.config.frame_rate)
        plt.show()
