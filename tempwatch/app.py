"""The monitoring loop: sample sensors, update states and report to a server."""

from __future__ import annotations

import argparse
import logging
import queue
import threading
from typing import Callable, Sequence

from .adc import NUM_ADC_CHANNELS, AdcReader
from .http_post import PostError, send_json_post
from .payload import changed_systems_to_json, systems_to_json
from .states import (
    SENSOR_IDS,
    SensorReading,
    SystemCollection,
    default_collection,
)

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:3000/api/data"
QUEUE_LENGTH = 100
SENSE_INTERVAL = 0.1
ENQUEUE_TIMEOUT = 0.1
CONTROL_POLL = 0.1
SEND_INTERVAL = 30.0
VERIFY_INTERVAL = 0.1
ADC_FULL_SCALE_RAW = 4095
ADC_FULL_SCALE_MV = 3600.0


class Monitor:
    """Ties the sensor reader, the system states and the server together."""

    def __init__(
        self,
        reader: AdcReader,
        collection: SystemCollection | None = None,
        url: str = DEFAULT_URL,
        connected: Callable[[], bool] | bool = True,
    ) -> None:
        self.reader = reader
        self.collection = collection if collection is not None else default_collection()
        self.url = url
        self._connected = connected if callable(connected) else (lambda: connected)
        self.queue: queue.Queue[list[SensorReading]] = queue.Queue(maxsize=QUEUE_LENGTH)
        self._lock = threading.Lock()

    @property
    def connected(self) -> bool:
        return bool(self._connected())

    def sense_once(self) -> list[SensorReading]:
        """Read every channel and queue the readings; a full queue drops them."""
        results = self.reader.read_all()
        readings = [
            SensorReading(name, result.voltage)
            for name, result in zip(SENSOR_IDS, results)
        ]
        try:
            self.queue.put(readings, timeout=ENQUEUE_TIMEOUT)
        except queue.Full:
            logger.debug("sensor queue full, readings dropped")
        return readings

    def control_once(self, timeout: float | None = None) -> bool:
        """Process one queued batch of readings; False if none arrived in time."""
        try:
            readings = self.queue.get(timeout=timeout)
        except queue.Empty:
            return False
        with self._lock:
            self.collection.process_readings(readings)
        return True

    def _post(self, document: str) -> bool:
        logger.info("sending data to server: %s", document)
        try:
            send_json_post(self.url, document)
        except PostError:
            logger.warning("could not send data to the server")
            return False
        return True

    def send_periodic_once(self) -> bool:
        """Post the full snapshot of all systems if connected."""
        with self._lock:
            document = systems_to_json(self.collection)
        if not self.connected:
            return False
        return self._post(document)

    def verify_changes_once(self) -> bool:
        """Post the systems whose state just changed, if any and connected."""
        with self._lock:
            document = changed_systems_to_json(self.collection)
        if document is None or not self.connected:
            return False
        return self._post(document)

    def run(self, stop: threading.Event) -> None:
        """Run all four loops on worker threads until ``stop`` is set."""

        def sensing() -> None:
            while not stop.is_set():
                self.sense_once()
                stop.wait(SENSE_INTERVAL)

        def control() -> None:
            while not stop.is_set():
                self.control_once(timeout=CONTROL_POLL)

        def periodic() -> None:
            while not stop.wait(SEND_INTERVAL):
                self.send_periodic_once()

        def verify() -> None:
            while not stop.is_set():
                self.verify_changes_once()
                stop.wait(VERIFY_INTERVAL)

        threads = [
            threading.Thread(target=target, name=name, daemon=True)
            for target, name in (
                (sensing, "sense"),
                (control, "control"),
                (periodic, "periodic"),
                (verify, "verify"),
            )
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()


def _linear_millivolts(raw: int) -> float:
    return raw * ADC_FULL_SCALE_MV / ADC_FULL_SCALE_RAW


def main(argv: Sequence[str] | None = None) -> int:
    """Run the monitor against constant simulated channel values."""
    parser = argparse.ArgumentParser(
        prog="tempwatch", description="Monitor four temperature sensors."
    )
    parser.add_argument("--url", default=DEFAULT_URL, help="server endpoint")
    parser.add_argument(
        "--raw",
        type=int,
        nargs=NUM_ADC_CHANNELS,
        default=[0] * NUM_ADC_CHANNELS,
        metavar="VALUE",
        help="simulated raw ADC value for each channel",
    )
    parser.add_argument(
        "--duration", type=float, default=None, help="seconds to run before stopping"
    )
    parser.add_argument(
        "--offline", action="store_true", help="never contact the server"
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    by_channel = {4 + i: value for i, value in enumerate(args.raw)}
    reader = AdcReader(lambda channel: by_channel[channel], _linear_millivolts)
    monitor = Monitor(reader, default_collection(), args.url, not args.offline)

    stop = threading.Event()
    timer = None
    if args.duration is not None:
        timer = threading.Timer(args.duration, stop.set)
        timer.start()
    try:
        monitor.run(stop)
    except KeyboardInterrupt:
        stop.set()
    finally:
        if timer is not None:
            timer.cancel()
    print(monitor.collection.describe(), end="")
    return 0