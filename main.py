"""桌面遥测面板启动入口。"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

# 确保 src 加入路径
PROJECT_ROOT = Path(__file__).resolve().parent
SRC_DIR = PROJECT_ROOT / "src"
if SRC_DIR.exists() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from scripts.dev_server import build_server, start_server_in_thread, wait_until_started
from telepanel.config import DashboardConfig
from telepanel.core.channel import SenderSlot, create_channel
from telepanel.errors import ConfigError
from telepanel.service import Dashboard
from telepanel.ui import create_app
from telepanel.ui.plot_window import PlotWindow

logger = logging.getLogger(__name__)


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s][%(levelname)s] %(name)s: %(message)s")

    parser = argparse.ArgumentParser(description="Live telemetry panel")
    parser.add_argument("config", nargs="?", default=None, help="path to config.json")
    args = parser.parse_args()

    try:
        config = DashboardConfig.load(args.config)
    except ConfigError as exc:
        logger.error("配置加载失败: %s", exc)
        sys.exit(1)

    logger.info("已加载配置，端口 %d: %s", config.port, config.summary())

    dashboard = Dashboard(config)
    sender, receiver = create_channel(config.channel_capacity)
    dashboard.set_receiver(receiver)

    slot = SenderSlot()
    slot.install(sender)

    server = build_server(create_app(slot), config.host, config.port)
    server_thread = start_server_in_thread(server)
    if not wait_until_started(server, server_thread):
        logger.error("采集服务启动失败，端口 %d 可能已被占用", config.port)
        sys.exit(1)
    logger.info("采集服务监听 http://%s:%d", config.host, config.port)
    dashboard.append_log(f"Listening on http://{config.host}:{config.port}")

    try:
        PlotWindow(dashboard, title="Telemetry Panel v0.1.0").run()
    finally:
        dashboard.close()
        server.should_exit = True
        server_thread.join(timeout=5.0)


if __name__ == "__main__":
    main()
