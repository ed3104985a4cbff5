# cobbler/core/models.py
import math
import re
import time
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Optional

from .timefmt import parse_duration, parse_timestamp

SITE_URL = "https://scenestream.net/demovibes"
UNKNOWN = "UNKNOWN"


_INTEGER = re.compile(r"[+-]?\d+", re.ASCII)


def _to_int(value: Optional[str]) -> int:
    if value is None or not _INTEGER.fullmatch(value):
        return 0
    return int(value)


def _text(el: Optional[ET.Element]) -> Optional[str]:
    if el is None or not el.text:
        return None
    return el.text


def _artist_name(artists: list) -> str:
    # Only one or two credited artists are understood; anything else is blank.
    if len(artists) == 1:
        return _text(artists[0]) or ""
    if len(artists) == 2:
        first, second = _text(artists[0]), _text(artists[1])
        if first and second:
            return f"{first} & {second}"
    return ""


@dataclass(frozen=True)
class NowPlayingEntry:
    artist: str = ""
    song: str = ""
    artist_id: int = 0
    song_id: int = 0
    song_duration: float = 0.0  # seconds
    requester: str = ""
    play_start: float = field(default_factory=time.time)  # epoch seconds

    def __post_init__(self):
        if not math.isfinite(self.song_duration) or self.song_duration < 0:
            raise ValueError(f"song_duration must be a finite, non-negative number of seconds, got {self.song_duration!r}")

    @classmethod
    def from_element(cls, entry: Optional[ET.Element], now: Optional[float] = None) -> "NowPlayingEntry":
        """
        Build an entry from a queue <entry> element. Never raises: missing or
        malformed fields fall back to their defaults.
        """
        now = time.time() if now is None else now
        if entry is None:
            return cls(song=UNKNOWN, requester=UNKNOWN, play_start=now)

        artists = entry.findall("artist")
        song = entry.find("song")

        artist_id = 0
        if len(artists) == 1:
            artist_id = _to_int(artists[0].get("id"))

        if song is not None:
            length = song.get("length", "0:00")
            song_id = _to_int(song.get("id"))
        else:
            length = "0:00"
            song_id = 0

        playstart = _text(entry.find("playstart"))

        return cls(
            artist=_artist_name(artists),
            song=_text(song) or UNKNOWN,
            artist_id=artist_id,
            song_id=song_id,
            song_duration=parse_duration(length),
            requester=_text(entry.find("requester")) or UNKNOWN,
            play_start=parse_timestamp(playstart, now) if playstart else now,
        )

    def time_left_at(self, now: float) -> float:
        return self.song_duration - (now - self.play_start)

    def progress_at(self, now: float) -> float:
        if self.song_duration == 0.0:
            return 0.0
        return min(max(1.0 - self.time_left_at(now) / self.song_duration, 0.0), 1.0)

    @property
    def time_left(self) -> float:
        return self.time_left_at(time.time())

    @property
    def progress(self) -> float:
        return self.progress_at(time.time())

    @property
    def song_url(self) -> str:
        return f"{SITE_URL}/song/{self.song_id}/"

    @property
    def artist_url(self) -> str:
        return f"{SITE_URL}/artist/{self.artist_id}/"


def extract_now_playing(root: ET.Element, now: Optional[float] = None) -> NowPlayingEntry:
    # root is <playlist>; a document without now/entry yields the defaults
    if root.tag != "playlist":
        return NowPlayingEntry.from_element(None, now)
    return NowPlayingEntry.from_element(root.find("now/entry"), now)
