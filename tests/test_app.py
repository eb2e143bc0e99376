import json
import socket
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer

import pytest

from tempwatch.adc import AdcReader
from tempwatch.app import QUEUE_LENGTH, Monitor, main
from tempwatch.states import (
    SENSOR_IDS,
    SystemState,
    default_collection,
    voltage_to_temperature,
)


class _Server:
    def __init__(self):
        self.bodies = []
        owner = self

        class Handler(BaseHTTPRequestHandler):
            def do_POST(self):
                length = int(self.headers.get("Content-Length", 0))
                owner.bodies.append(json.loads(self.rfile.read(length)))
                self.send_response(200)
                self.send_header("Content-Length", "2")
                self.end_headers()
                self.wfile.write(b"ok")

            def log_message(self, *args):
                pass

        self.httpd = HTTPServer(("127.0.0.1", 0), Handler)
        threading.Thread(target=self.httpd.serve_forever, daemon=True).start()

    @property
    def url(self):
        return f"http://127.0.0.1:{self.httpd.server_address[1]}/api/data"

    def close(self):
        self.httpd.shutdown()
        self.httpd.server_close()


@pytest.fixture
def server():
    srv = _Server()
    yield srv
    srv.close()


def _reader(raw=3000):
    # One raw unit per millivolt, no offsets.
    return AdcReader(lambda channel: raw, lambda value: value, [0.0, 0.0, 0.0, 0.0])


def test_sense_once_queues_named_readings():
    monitor = Monitor(_reader(), default_collection(), "http://localhost/", False)
    readings = monitor.sense_once()
    assert [r.name for r in readings] == list(SENSOR_IDS)
    assert all(r.voltage == pytest.approx(3.0) for r in readings)
    assert monitor.queue.qsize() == 1


def test_control_once_updates_collection():
    monitor = Monitor(_reader(), default_collection(), "http://localhost/", False)
    monitor.sense_once()
    assert monitor.control_once(timeout=1.0) is True
    for system in monitor.collection.systems:
        assert system.voltage == pytest.approx(3.0)
        assert system.temperature == pytest.approx(voltage_to_temperature(3.0))
        assert system.previous_state is SystemState.NORMAL
        assert system.current_state is SystemState.PREVENTIVE


def test_control_once_times_out_on_empty_queue():
    monitor = Monitor(_reader(), default_collection(), "http://localhost/", False)
    assert monitor.control_once(timeout=0.01) is False


def test_full_queue_drops_readings():
    monitor = Monitor(_reader(), default_collection(), "http://localhost/", False)
    for _ in range(QUEUE_LENGTH + 1):
        monitor.sense_once()
    assert monitor.queue.qsize() == QUEUE_LENGTH


def test_send_periodic_posts_all_systems(server):
    monitor = Monitor(_reader(), default_collection(), server.url, True)
    assert monitor.send_periodic_once() is True
    entries = server.bodies[0]["data"]
    assert [e["id_sensors"] for e in entries] == list(SENSOR_IDS)
    assert all("status" not in e for e in entries)


def test_send_periodic_skipped_when_offline(server):
    monitor = Monitor(_reader(), default_collection(), server.url, lambda: False)
    assert monitor.send_periodic_once() is False
    assert server.bodies == []


def test_verify_changes_posts_only_after_state_change(server):
    monitor = Monitor(_reader(), default_collection(), server.url, True)
    assert monitor.verify_changes_once() is False
    monitor.sense_once()
    monitor.control_once(timeout=1.0)
    assert monitor.verify_changes_once() is True
    entries = server.bodies[0]["data"]
    assert len(entries) == len(SENSOR_IDS)
    assert {e["status"] for e in entries} == {SystemState.PREVENTIVE.value}


def test_failed_post_reports_false():
    sock = socket.socket()
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    monitor = Monitor(
        _reader(), default_collection(), f"http://127.0.0.1:{port}/api/data", True
    )
    assert monitor.send_periodic_once() is False


def test_run_processes_and_reports_until_stopped(server):
    monitor = Monitor(_reader(), default_collection(), server.url, True)
    stop = threading.Event()
    timer = threading.Timer(0.5, stop.set)
    timer.start()
    monitor.run(stop)
    timer.cancel()
    assert stop.is_set()
    expected = voltage_to_temperature(3.0)
    assert all(
        s.temperature == pytest.approx(expected) for s in monitor.collection.systems
    )
    assert any(
        e.get("status") == SystemState.PREVENTIVE.value
        for body in server.bodies
        for e in body["data"]
    )


def test_main_runs_offline_and_prints_summary(capsys):
    assert main(["--duration", "0.3", "--offline"]) == 0
    out = capsys.readouterr().out
    for name in SENSOR_IDS:
        assert f"[{name}]" in out
    assert "NORMAL -> NORMAL" in out