import threading
import time

from swingmetrics.sensors.feed import SensorKind, SensorOption, gyroscope_feed
from swingmetrics.sensors.simulated import SimulatedPlatform


def test_platform_reports_supported_kinds() -> None:
    platform = SimulatedPlatform([SensorKind.ACCELEROMETER])
    assert platform.is_supported(SensorKind.ACCELEROMETER)
    assert not platform.is_supported(SensorKind.GYROSCOPE)
    assert platform.get_default_sensor(SensorKind.GYROSCOPE) is None


def test_listener_delivers_events_until_stopped() -> None:
    platform = SimulatedPlatform(seed=3)
    got_three = threading.Event()
    events = []

    def on_event(event):
        events.append(event)
        if len(events) >= 3:
            got_three.set()

    feed = gyroscope_feed(platform)
    feed.open()
    feed.subscribe(5, on_event)
    feed.start()
    assert got_three.wait(2.0)
    feed.stop()
    count = len(events)

    assert all(event.kind is SensorKind.GYROSCOPE for event in events)
    assert all(len(event.values) == 3 for event in events)
    timestamps = [event.timestamp_ns for event in events]
    assert timestamps == sorted(timestamps)
    time.sleep(0.05)
    assert len(events) == count


def test_listener_records_requested_option() -> None:
    platform = SimulatedPlatform()
    sensor = platform.get_default_sensor(SensorKind.ACCELEROMETER)
    listener = platform.create_listener(sensor)
    listener.set_option(SensorOption.ALWAYS_ON)
    assert listener.option is SensorOption.ALWAYS_ON
