from telepanel.config import DashboardConfig, PlotConfig
from telepanel.core.channel import create_channel
from telepanel.service import Dashboard


def _config() -> DashboardConfig:
    return DashboardConfig(
        port=14514,
        plots=[
            PlotConfig(name="P", x_axis="t", y_axis=["temp"]),
            PlotConfig(name="Q", x_axis="t", y_axis=["a", "b"]),
        ],
    )


def _dashboard():
    sender, receiver = create_channel(16)
    dashboard = Dashboard(_config(), receiver)
    return dashboard, sender


def test_startup_log_summarises_config() -> None:
    dashboard, _ = _dashboard()

    entries = dashboard.logs.entries()
    assert len(entries) == 1
    assert entries[0].message.startswith("Loaded config, port=14514: [name=P,x=t,y=['temp']]")


def test_two_requests_scenario() -> None:
    dashboard, sender = _dashboard()
    series = dashboard.plot("P").series("temp")

    sender.try_send([("t", "1,2,3"), ("temp", "10,20,30")])
    dashboard.tick()

    assert series.points() == [(1.0, 10.0), (2.0, 20.0), (3.0, 30.0)]
    assert series.latest == (3.0, 30.0)

    sender.try_send([("t", "4"), ("temp", "40,41")])
    dashboard.tick()

    assert series.points()[3:] == [(4.0, 40.0)]
    assert series.latest == (4.0, 40.0)


def test_unknown_column_logs_once_without_mutation() -> None:
    dashboard, sender = _dashboard()
    before = len(dashboard.logs)

    sender.try_send([("foo", "1,2")])
    dashboard.tick()

    new_entries = dashboard.logs.entries()[before:]
    assert [entry.message for entry in new_entries] == ["Unknown column name: {foo}"]
    for plot in dashboard.plots:
        for column in plot.y_axis:
            assert len(plot.series(column)) == 0


def test_malformed_column_is_isolated() -> None:
    dashboard, sender = _dashboard()
    before = len(dashboard.logs)

    sender.try_send([("t", "1,2"), ("temp", "1,2,x,4"), ("a", "5,6")])
    dashboard.tick()

    assert len(dashboard.plot("P").series("temp")) == 0
    assert dashboard.plot("Q").series("a").points() == [(1.0, 5.0), (2.0, 6.0)]
    messages = [entry.message for entry in dashboard.logs.entries()[before:]]
    assert len(messages) == 1
    assert "temp" in messages[0] and "'x'" in messages[0]


def test_tick_merges_records_last_write_wins() -> None:
    dashboard, sender = _dashboard()

    sender.try_send([("t", "1,2"), ("temp", "10,20")])
    sender.try_send([("temp", "99")])
    count = dashboard.tick()

    assert count == 5
    assert dashboard.plot("P").series("temp").points() == [(1.0, 99.0)]


def test_length_grows_by_min_of_pairs() -> None:
    dashboard, sender = _dashboard()
    series = dashboard.plot("Q").series("b")

    sender.try_send([("t", "1 2 3 4"), ("b", "1,2")])
    dashboard.tick()

    assert len(series) == 2


def test_empty_tick_is_noop() -> None:
    dashboard, _ = _dashboard()
    before = len(dashboard.logs)

    assert dashboard.tick() == 0
    assert len(dashboard.logs) == before


def test_tick_without_receiver_logs_error() -> None:
    dashboard = Dashboard(_config())

    assert dashboard.tick() == 0
    assert dashboard.logs.newest_first()[0].message == "no channel is found"


def test_reset_clears_all_series() -> None:
    dashboard, sender = _dashboard()
    sender.try_send([("t", "1"), ("temp", "2"), ("a", "3")])
    dashboard.tick()

    dashboard.reset()
    dashboard.reset()

    for plot in dashboard.plots:
        for column, (points, latest) in plot.snapshot().items():
            assert points == []
            assert latest == (0.0, 0.0)


def test_close_marks_sender_closed() -> None:
    dashboard, sender = _dashboard()

    dashboard.close()

    assert sender.closed


def test_log_capacity_drops_oldest() -> None:
    config = _config().model_copy(update={"log_capacity": 2})
    sender, receiver = create_channel(4)
    dashboard = Dashboard(config, receiver)

    sender.try_send([("foo", "1")])
    dashboard.tick()
    sender.try_send([("bar", "1")])
    dashboard.tick()

    assert [entry.message for entry in dashboard.logs.newest_first()] == [
        "Unknown column name: {bar}",
        "Unknown column name: {foo}",
    ]


def test_receiver_installed_after_construction() -> None:
    dashboard = Dashboard(_config())
    sender, receiver = create_channel(4)
    dashboard.set_receiver(receiver)

    sender.try_send([("t", "1"), ("temp", "2")])
    dashboard.tick()

    assert dashboard.plot("P").series("temp").points() == [(1.0, 2.0)]
    assert all(entry.message != "no channel is found" for entry in dashboard.logs.entries())


def test_append_log_shows_newest_first() -> None:
    dashboard, _ = _dashboard()

    dashboard.append_log("Listening on http://127.0.0.1:14514")

    assert dashboard.logs.newest_first()[0].message == "Listening on http://127.0.0.1:14514"
