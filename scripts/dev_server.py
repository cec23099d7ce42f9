"""单独启动采集服务，并以无界面方式运行面板消费循环。"""

from __future__ import annotations

import asyncio
import logging
import signal
import sys
import threading
import time
from contextlib import suppress
from pathlib import Path
from typing import Optional

import uvicorn
from fastapi import FastAPI

PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from telepanel.config import DashboardConfig
from telepanel.core.channel import SenderSlot, create_channel
from telepanel.errors import ConfigError
from telepanel.service import Dashboard
from telepanel.ui import create_app

logger = logging.getLogger(__name__)


def build_server(app: FastAPI, host: str, port: int) -> uvicorn.Server:
    uvicorn_config = uvicorn.Config(app, host=host, port=port, reload=False, log_level="warning")
    return uvicorn.Server(uvicorn_config)


def start_server_in_thread(server: uvicorn.Server) -> threading.Thread:
    """在独立线程运行采集服务，拥有自己的事件循环。"""

    def _run() -> None:
        asyncio.run(server.serve())

    thread = threading.Thread(target=_run, name="telepanel-ingest", daemon=True)
    thread.start()
    return thread


def wait_until_started(server: uvicorn.Server, thread: threading.Thread, timeout: float = 5.0) -> bool:
    """等待服务完成端口绑定；线程提前退出（如端口被占用）时返回 False。"""

    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if server.started:
            return True
        if not thread.is_alive():
            return False
        time.sleep(0.05)
    return server.started


async def run_headless(dashboard: Dashboard, stop_event: asyncio.Event) -> None:
    """按帧率周期消费通道，把日志打印到终端。"""

    period = 1.0 / dashboard.config.frame_rate
    printed = 0
    while not stop_event.is_set():
        count = dashboard.tick()
        if count:
            logger.info("本轮解析 %d 个采样", count)
        entries = dashboard.logs.entries()
        for entry in entries[printed:]:
            logger.info("[面板日志] %s", entry.message)
        printed = len(entries)
        with suppress(asyncio.TimeoutError):
            await asyncio.wait_for(stop_event.wait(), timeout=period)


async def main(config_path: Optional[str] = None) -> None:
    config = DashboardConfig.load(config_path)
    dashboard = Dashboard(config)
    sender, receiver = create_channel(config.channel_capacity)
    dashboard.set_receiver(receiver)
    slot = SenderSlot()
    slot.install(sender)

    server = build_server(create_app(slot), config.host, config.port)
    logger.info("采集服务监听 http://%s:%d", config.host, config.port)
    dashboard.append_log(f"Listening on http://{config.host}:{config.port}")

    stop_event = asyncio.Event()

    def _handle_stop(*_: object) -> None:
        logger.info("收到终止信号，准备关闭服务器…")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, _handle_stop)

    async def _serve() -> None:
        await server.serve()
        stop_event.set()

    serve_task = asyncio.create_task(_serve())
    consumer_task = asyncio.create_task(run_headless(dashboard, stop_event))

    await stop_event.wait()
    dashboard.close()
    server.should_exit = True
    await consumer_task
    with suppress(asyncio.CancelledError):
        await serve_task


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s")
    try:
        asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else None))
    except ConfigError as exc:
        logger.error("配置加载失败: %s", exc)
        sys.exit(1)
