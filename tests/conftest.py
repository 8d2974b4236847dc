"""Shared fixtures for netools tests."""

import logging
import threading
import time

import pytest

from netools.utils.logger import NetLogger


@pytest.fixture(autouse=True)
def reset_logging():
    """Give every test a freshly configured netools logger."""
    NetLogger.setup(force=True)
    yield
    NetLogger.setup(force=True)


@pytest.fixture
def logs(caplog):
    """Capture netools records at DEBUG; call to get the message list."""
    caplog.set_level(logging.DEBUG, logger="netools")

    def _messages():
        return [r.getMessage() for r in list(caplog.records)]

    return _messages


@pytest.fixture
def wait_until():
    """Poll a predicate until it holds or the timeout expires."""
    def _wait(predicate, timeout: float = 3.0, interval: float = 0.02) -> bool:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            if predicate():
                return True
            time.sleep(interval)
        return predicate()

    return _wait


@pytest.fixture
def start_receiver():
    """Run receiver.receive() in a background thread; cancel and close on teardown."""
    running = []

    def _start(receiver):
        cancel = threading.Event()
        thread = threading.Thread(target=receiver.receive, args=(cancel,), daemon=True)
        thread.start()
        running.append((receiver, cancel, thread))
        return cancel, thread

    yield _start

    for receiver, cancel, thread in running:
        cancel.set()
        thread.join(timeout=5)
        receiver.close()
