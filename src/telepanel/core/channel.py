"""采集端到面板的有界路由通道。

多生产者（HTTP 请求协程，运行在服务线程的事件循环中）、单消费者（渲染线程）。
通道满时 ``send`` 挂起等待，不会丢弃记录；消费端只做非阻塞的 ``try_receive``。
"""

from __future__ import annotations

import asyncio
import collections
import threading
from typing import Deque, Iterable, List, Optional, Tuple

from telepanel.core.parser import Record
from telepanel.errors import ChannelClosed, ChannelNotReady

_Waiter = Tuple[asyncio.AbstractEventLoop, "asyncio.Future[None]"]


def _resolve(future: "asyncio.Future[None]") -> None:
    if not future.done():
        future.set_result(None)


def _notify(waiter: _Waiter) -> bool:
    loop, future = waiter
    if future.done():
        return False
    try:
        loop.call_soon_threadsafe(_resolve, future)
    except RuntimeError:  # 事件循环已关闭
        return False
    return True


class _ChannelState:
    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError("channel capacity must be at least 1")
        self.capacity = capacity
        self.queue: Deque[Record] = collections.deque()
        self.waiters: Deque[_Waiter] = collections.deque()
        self.lock = threading.Lock()
        self.closed = False

    def wake_one_locked(self) -> None:
        while self.waiters:
            if _notify(self.waiters.popleft()):
                return


class RecordSender:
    """通道发送端，可在多个请求间共享。"""

    def __init__(self, state: _ChannelState) -> None:
        self._state = state

    @property
    def closed(self) -> bool:
        with self._state.lock:
            return self._state.closed

    async def send(self, record: Iterable[Tuple[str, str]]) -> None:
        """投递一条记录；通道满时挂起，通道关闭时抛出 ``ChannelClosed``。"""

        state = self._state
        item: Record = list(record)
        loop = asyncio.get_running_loop()
        while True:
            with state.lock:
                if state.closed:
                    raise ChannelClosed()
                if len(state.queue) < state.capacity:
                    state.queue.append(item)
                    return
                waiter: _Waiter = (loop, loop.create_future())
                state.waiters.append(waiter)
            try:
                await waiter[1]
            except asyncio.CancelledError:
                with state.lock:
                    try:
                        state.waiters.remove(waiter)
                    except ValueError:
                        # 已被唤醒但不再需要空位，转交给下一个等待者
                        state.wake_one_locked()
                raise

    def try_send(self, record: Iterable[Tuple[str, str]]) -> bool:
        """非阻塞投递，通道满时返回 False。"""

        state = self._state
        with state.lock:
            if state.closed:
                raise ChannelClosed()
            if len(state.queue) >= state.capacity:
                return False
            state.queue.append(list(record))
            return True


class RecordReceiver:
    """通道接收端，只应由面板消费循环持有。"""

    def __init__(self, state: _ChannelState) -> None:
        self._state = state

    def try_receive(self) -> Optional[Record]:
        """取出一条记录；通道为空时立即返回 None。"""

        state = self._state
        with state.lock:
            if not state.queue:
                return None
            record = state.queue.popleft()
            state.wake_one_locked()
        return record

    def drain(self) -> List[Record]:
        """取出当前可得的全部记录，不等待。"""

        records: List[Record] = []
        while True:
            record = self.try_receive()
            if record is None:
                return records
            records.append(record)

    def close(self) -> None:
        """关闭通道：挂起中与之后的 ``send`` 都会失败，已入队的记录仍可取出。"""

        state = self._state
        with state.lock:
            state.closed = True
            waiters = list(state.waiters)
            state.waiters.clear()
        for waiter in waiters:
            _notify(waiter)

    def __len__(self) -> int:
        with self._state.lock:
            return len(self._state.queue)


def create_channel(capacity: int = 512) -> Tuple[RecordSender, RecordReceiver]:
    state = _ChannelState(capacity)
    return RecordSender(state), RecordReceiver(state)


class SenderSlot:
    """只安装一次的发送端句柄，注入到 HTTP 服务中。

    锁只保护安装与读取，不会在 await 期间持有。
    """

    def __init__(self) -> None:
        self._sender: Optional[RecordSender] = None
        self._lock = threading.Lock()

    def install(self, sender: RecordSender) -> None:
        with self._lock:
            if self._sender is not None:
                raise RuntimeError("sender has already been installed")
            self._sender = sender

    @property
    def installed(self) -> bool:
        with self._lock:
            return self._sender is not None

    def get(self) -> RecordSender:
        with self._lock:
            sender = self._sender
        if sender is None:
            raise ChannelNotReady()
        return sender
