from concurrent.futures import Executor, Future
from datetime import datetime, timezone
from email.utils import format_datetime

import pytest


class InlineExecutor(Executor):
    """Runs submitted work immediately so futures are done on return."""

    def __init__(self):
        self.submitted = 0

    def submit(self, fn, *args, **kwargs):
        self.submitted += 1
        future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except BaseException as e:
            future.set_exception(e)
        return future


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def queue_xml(entry: str) -> bytes:
    return f"<playlist><now>{entry}</now><queue/></playlist>".encode("utf-8")


def rfc_date(epoch: float) -> str:
    return format_datetime(datetime.fromtimestamp(int(epoch), timezone.utc))


@pytest.fixture
def executor():
    return InlineExecutor()


@pytest.fixture
def clock():
    return FakeClock()
