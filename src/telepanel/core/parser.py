"""把原始字段值解析为浮点采样。"""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from telepanel.errors import ParseError

Record = List[Tuple[str, str]]

_DELIMITERS = re.compile(r"[, ]")
_FLOAT_TOKEN = re.compile(
    r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|[+-]?(?:inf|infinity|nan)",
    re.IGNORECASE | re.ASCII,
)


def parse_values(raw: str) -> List[float]:
    """按逗号或空格切分并解析为 float，空片段被忽略。

    任意片段无法解析时整串作废，抛出 ``ParseError``。
    """

    values: List[float] = []
    for token in _DELIMITERS.split(raw):
        if not token:
            continue
        if not _FLOAT_TOKEN.fullmatch(token):
            raise ParseError(token, ValueError(f"could not convert string to float: {token!r}"))
        values.append(float(token))
    return values


class SampleSetBuilder:
    """合并一次消费轮次内的所有记录，生成列名到采样序列的映射。

    同名列以后到的记录为准；解析失败的列在本轮内被移除，错误信息按顺序收集。
    """

    def __init__(self) -> None:
        self._samples: Dict[str, List[float]] = {}
        self._errors: List[Tuple[str, ParseError]] = []
        self._count = 0

    def add_record(self, record: Iterable[Tuple[str, str]]) -> None:
        for column, raw in record:
            error = self.add_column(column, raw)
            if error is not None:
                self._errors.append((column, error))

    def add_column(self, column: str, raw: str) -> Optional[ParseError]:
        try:
            values = parse_values(raw)
        except ParseError as exc:
            self._samples.pop(column, None)
            return exc
        self._samples[column] = values
        self._count += len(values)
        return None

    @property
    def samples(self) -> Dict[str, List[float]]:
        return self._samples

    @property
    def errors(self) -> Sequence[Tuple[str, ParseError]]:
        return tuple(self._errors)

    @property
    def sample_count(self) -> int:
        """本轮成功解析的采样总数（含被后续记录覆盖的部分）。"""

        return self._count
