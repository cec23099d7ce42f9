"""面板配置模型。"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, Field, ValidationError, model_validator

from telepanel.errors import ConfigError

CONFIG_ENV_VAR = "TELEPANEL_CONFIG"
DEFAULT_CONFIG_PATH = Path("config.json")
MAX_PLOTS = 6


class PlotConfig(BaseModel):
    """单个图表：显示名、x 轴列名与一个或多个 y 轴列名。"""

    name: str
    x_axis: str = Field(min_length=1)
    y_axis: list[str] = Field(min_length=1)

    @model_validator(mode="after")
    def _check_axes(self) -> "PlotConfig":
        seen: set[str] = set()
        for column in self.y_axis:
            if not column:
                raise ValueError(f"plot {self.name!r}: empty y-axis column name")
            if column in seen:
                raise ValueError(f"plot {self.name!r}: duplicate y-axis column {column!r}")
            seen.add(column)
        if self.x_axis in seen:
            raise ValueError(f"plot {self.name!r}: column {self.x_axis!r} is both x-axis and y-axis")
        return self


class DashboardConfig(BaseModel):
    """总配置，从 JSON 文件加载。"""

    port: int = Field(14514, ge=1, le=65535)
    host: str = "127.0.0.1"
    channel_capacity: int = Field(512, ge=1)
    log_capacity: Optional[int] = Field(None, ge=1)
    frame_rate: float = Field(30.0, gt=0.0, le=240.0)
    plots: list[PlotConfig] = Field(default_factory=list, max_length=MAX_PLOTS)

    @model_validator(mode="after")
    def _check_plot_names(self) -> "DashboardConfig":
        seen: set[str] = set()
        for plot in self.plots:
            if plot.name in seen:
                raise ValueError(f"duplicate plot name {plot.name!r}")
            seen.add(plot.name)
        return self

    def summary(self) -> str:
        return ", ".join(f"[name={p.name},x={p.x_axis},y={p.y_axis}]" for p in self.plots)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "DashboardConfig":
        """读取并校验 JSON 配置，任何失败都转换为 ``ConfigError``。"""

        cfg_path = Path(path)
        try:
            data = json.loads(cfg_path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigError(f"cannot read config {cfg_path}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise ConfigError(f"malformed config {cfg_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ConfigError(f"malformed config {cfg_path}: top level must be an object")
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise ConfigError(f"invalid config {cfg_path}: {exc}") from exc

    @classmethod
    def load(cls, path: Optional[Union[str, Path]] = None) -> "DashboardConfig":
        """依次尝试参数、环境变量 ``TELEPANEL_CONFIG`` 与当前目录下的 `config.json`。"""

        if path is None:
            path = os.environ.get(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
        return cls.from_file(path)
