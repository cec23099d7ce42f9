"""面板错误日志：按时间顺序追加，按最新优先展示。"""

from __future__ import annotations

import collections
import datetime as dt
from dataclasses import dataclass
from typing import Callable, Deque, List, Optional


@dataclass(frozen=True)
class LogEntry:
    """单条日志。"""

    timestamp: dt.datetime
    message: str


class LogSink:
    """只追加的日志列表，可选容量上限（超出时丢弃最旧条目）。"""

    def __init__(
        self,
        capacity: Optional[int] = None,
        clock: Callable[[], dt.datetime] = dt.datetime.now,
    ) -> None:
        self._entries: Deque[LogEntry] = collections.deque(maxlen=capacity)
        self._clock = clock

    def append(self, message: str) -> LogEntry:
        entry = LogEntry(timestamp=self._clock(), message=message)
        self._entries.append(entry)
        return entry

    def entries(self) -> List[LogEntry]:
        """按追加顺序返回全部日志。"""

        return list(self._entries)

    def newest_first(self) -> List[LogEntry]:
        """按展示顺序（最新在前）返回全部日志。"""

        return list(reversed(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
