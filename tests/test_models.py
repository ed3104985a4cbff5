import xml.etree.ElementTree as ET

import pytest

from cobbler.core.models import NowPlayingEntry, extract_now_playing

from conftest import rfc_date

NOW = 1_700_000_000.0


def entry_el(body: str) -> ET.Element:
    return ET.fromstring(f"<entry>{body}</entry>")


def test_full_entry():
    el = entry_el(
        '<artist id="12">Purple Motion</artist>'
        '<song id="345" length="4:20">Satellite One</song>'
        "<requester>dipswitch</requester>"
        f"<playstart>{rfc_date(NOW - 20)}</playstart>"
    )
    entry = NowPlayingEntry.from_element(el, now=NOW)

    assert entry.artist == "Purple Motion"
    assert entry.song == "Satellite One"
    assert entry.artist_id == 12
    assert entry.song_id == 345
    assert entry.song_duration == 260.0
    assert entry.requester == "dipswitch"
    assert entry.play_start == NOW - 20
    assert entry.time_left_at(NOW) == 240.0


def test_two_artists_are_joined():
    el = entry_el('<artist id="1">Foo</artist><artist id="2">Bar</artist><song>x</song>')
    entry = NowPlayingEntry.from_element(el, now=NOW)
    assert entry.artist == "Foo & Bar"
    assert entry.artist_id == 0


def test_three_artists_leave_artist_blank():
    el = entry_el("<artist>A</artist><artist>B</artist><artist>C</artist>")
    assert NowPlayingEntry.from_element(el, now=NOW).artist == ""


def test_missing_fields_use_defaults():
    entry = NowPlayingEntry.from_element(entry_el(""), now=NOW)
    assert entry.artist == ""
    assert entry.song == "UNKNOWN"
    assert entry.requester == "UNKNOWN"
    assert entry.song_duration == 0.0
    assert entry.artist_id == 0
    assert entry.song_id == 0
    assert entry.play_start == NOW


def test_malformed_fields_use_defaults():
    el = entry_el(
        '<artist id="abc">X</artist>'
        '<song id="" length="soon">Y</song>'
        "<playstart>not a date</playstart>"
    )
    entry = NowPlayingEntry.from_element(el, now=NOW)
    assert entry.artist_id == 0
    assert entry.song_id == 0
    assert entry.song_duration == 0.0
    assert entry.play_start == NOW


def test_no_element_at_all():
    entry = NowPlayingEntry.from_element(None, now=NOW)
    assert entry.song == "UNKNOWN"
    assert entry.play_start == NOW


@pytest.mark.parametrize("elapsed", [-100.0, 0.0, 30.0, 90.0, 180.0, 5000.0])
def test_progress_is_clamped(elapsed):
    entry = NowPlayingEntry(song_duration=180.0, play_start=NOW)
    assert 0.0 <= entry.progress_at(NOW + elapsed) <= 1.0


def test_progress_with_zero_duration():
    entry = NowPlayingEntry(song_duration=0.0, play_start=NOW - 9999)
    assert entry.progress_at(NOW) == 0.0
    assert entry.progress == 0.0


def test_progress_midway():
    entry = NowPlayingEntry(song_duration=200.0, play_start=NOW - 50)
    assert entry.progress_at(NOW) == pytest.approx(0.25)


def test_entry_is_immutable():
    entry = NowPlayingEntry(song="x")
    with pytest.raises(AttributeError):
        entry.song = "y"


def test_links():
    entry = NowPlayingEntry(artist_id=7, song_id=99)
    assert entry.song_url == "https://scenestream.net/demovibes/song/99/"
    assert entry.artist_url == "https://scenestream.net/demovibes/artist/7/"


def test_extract_now_playing():
    root = ET.fromstring(
        "<playlist><now><entry><artist>A</artist><song>S</song></entry></now>"
        "<queue><entry><song>next</song></entry></queue></playlist>"
    )
    assert extract_now_playing(root, now=NOW).song == "S"


def test_extract_now_playing_without_entry():
    root = ET.fromstring("<playlist><queue/></playlist>")
    entry = extract_now_playing(root, now=NOW)
    assert entry.song == "UNKNOWN"
    assert entry.artist == ""


@pytest.mark.parametrize("value", ["1_2", " 12", "12.0", "0x1f"])
def test_loose_ids_are_rejected(value):
    el = entry_el(f'<artist id="{value}">A</artist><song id="{value}">S</song>')
    entry = NowPlayingEntry.from_element(el, now=NOW)
    assert entry.artist_id == 0
    assert entry.song_id == 0


@pytest.mark.parametrize("duration", [-1.0, float("nan"), float("inf")])
def test_bad_duration_is_refused(duration):
    with pytest.raises(ValueError):
        NowPlayingEntry(song_duration=duration)
