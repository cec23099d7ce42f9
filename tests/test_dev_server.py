import asyncio

from scripts.dev_server import run_headless
from telepanel.config import DashboardConfig, PlotConfig
from telepanel.core.channel import create_channel
from telepanel.service import Dashboard


def test_headless_loop_consumes_until_stopped() -> None:
    config = DashboardConfig(
        frame_rate=100.0,
        plots=[PlotConfig(name="P", x_axis="t", y_axis=["temp"])],
    )
    sender, receiver = create_channel(4)
    dashboard = Dashboard(config, receiver)

    async def scenario() -> None:
        stop_event = asyncio.Event()
        task = asyncio.create_task(run_headless(dashboard, stop_event))
        await sender.send([("t", "1"), ("temp", "5")])
        await asyncio.sleep(0.1)
        stop_event.set()
        await asyncio.wait_for(task, timeout=1.0)

    asyncio.run(scenario())

    assert dashboard.plot("P").series("temp").points() == [(1.0, 5.0)]
