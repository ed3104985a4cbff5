# cobbler/core/queue_feed.py
import enum
import time
import xml.etree.ElementTree as ET
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_futures
from dataclasses import dataclass
from typing import Callable, List, Optional

import requests

from .debug import debug_log
from .models import NowPlayingEntry, extract_now_playing

QUEUE_URL = "https://scenestream.net/demovibes/xml/queue/"
MIN_REFRESH_SECONDS = 5.0
REQUEST_TIMEOUT = 10
USER_AGENT = "Cobbler/1.0 (+https://scenestream.net/demovibes/)"

_HTTP = requests.Session()
_HTTP.headers.update({"User-Agent": USER_AGENT})


def fetch_queue(url: str = QUEUE_URL) -> bytes:
    r = _HTTP.get(url, timeout=REQUEST_TIMEOUT)
    r.raise_for_status()
    return r.content


class PollerState(enum.Enum):
    IDLE = "idle"
    FETCH_IN_FLIGHT = "fetch_in_flight"


@dataclass(frozen=True)
class QueueSnapshot:
    now_playing: NowPlayingEntry
    fetch_in_flight: bool
    last_fetch: float


class QueuePoller:
    """
    Owns the "now playing" entry for the station queue.

    Fetch and parse run on a single worker thread. The finished future is
    applied by collect(), which must be called from the owning (UI) thread;
    that is the only place poller state is written after a fetch.
    """

    def __init__(
        self,
        url: str = QUEUE_URL,
        fetch: Optional[Callable[[str], bytes]] = None,
        executor: Optional[Executor] = None,
        clock: Callable[[], float] = time.monotonic,
        min_interval: float = MIN_REFRESH_SECONDS,
    ):
        self.url = url
        self.min_interval = min_interval
        self._fetch = fetch or fetch_queue
        self._executor = executor or ThreadPoolExecutor(max_workers=1)
        self._clock = clock

        self.now_playing = NowPlayingEntry()
        self.state = PollerState.IDLE
        self.last_fetch = clock()

        self._future: Optional[Future] = None
        self._observers: List[Callable[[NowPlayingEntry], None]] = []
        self._first_response = True

    @classmethod
    def load(cls, **kwargs) -> "QueuePoller":
        poller = cls(**kwargs)
        poller.start()
        return poller

    # ==================================================
    # OBSERVERS
    # ==================================================

    def subscribe(self, callback: Callable[[NowPlayingEntry], None]):
        if callback not in self._observers:
            self._observers.append(callback)

    def unsubscribe(self, callback: Callable[[NowPlayingEntry], None]):
        try:
            self._observers.remove(callback)
        except ValueError:
            pass

    @property
    def snapshot(self) -> QueueSnapshot:
        return QueueSnapshot(
            now_playing=self.now_playing,
            fetch_in_flight=self.state is PollerState.FETCH_IN_FLIGHT,
            last_fetch=self.last_fetch,
        )

    # ==================================================
    # FETCHING
    # ==================================================

    def start(self):
        self._issue_fetch()

    def request_refresh(self) -> bool:
        if self.state is PollerState.FETCH_IN_FLIGHT:
            return False
        if self._clock() - self.last_fetch < self.min_interval:
            return False
        self._issue_fetch()
        return True

    def _issue_fetch(self):
        self.state = PollerState.FETCH_IN_FLIGHT
        self.last_fetch = self._clock()
        self._future = self._executor.submit(self._fetch_entry, self._first_response)

    def _fetch_entry(self, log_body: bool) -> NowPlayingEntry:
        # Runs on the worker thread. Must not touch poller state.
        data = self._fetch(self.url)
        if log_body:
            debug_log(f"Queue response: {data.decode('utf-8', errors='replace')}")
        root = ET.fromstring(data)
        return extract_now_playing(root)

    def collect(self, wait: Optional[float] = None) -> bool:
        """
        Apply a finished fetch. Returns True when a new entry was published.
        """
        future = self._future
        if future is None:
            return False
        if wait is not None and not future.done():
            wait_futures([future], timeout=wait)
        if not future.done():
            return False

        self._future = None
        self.state = PollerState.IDLE
        self._first_response = False

        try:
            entry = future.result()
        except requests.RequestException as e:
            debug_log(f"Queue fetch failed: {e}")
            return False
        except (ET.ParseError, LookupError, ValueError) as e:
            # bad markup, unknown declared encoding, undecodable bytes
            debug_log(f"Queue document unreadable: {e}")
            return False

        self.now_playing = entry
        debug_log(f"Now playing: {entry.song} — {entry.artist} (req. {entry.requester})")
        for callback in list(self._observers):
            callback(entry)
        return True

    def tick(self, now: Optional[float] = None) -> NowPlayingEntry:
        """
        One-second heartbeat: apply a finished fetch, then ask for a new one
        once the current track should have ended.
        """
        self.collect()
        now = time.time() if now is None else now
        if self.now_playing.time_left_at(now) < 0.0:
            self.request_refresh()
        return self.now_playing

    def shutdown(self):
        try:
            self._executor.shutdown(wait=False)
        except Exception as e:
            debug_log(f"Executor shutdown failed: {e}")
