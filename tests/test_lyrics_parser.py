import math

import pytest

from lyricsync.core.errors import LyricsParseError
from lyricsync.core.lyrics import EMPTY_LINE, Lyric, line_at, parse_synced_lyrics, plain_text


def test_single_timestamped_line():
    assert parse_synced_lyrics("[01:30]Hello") == [Lyric(90, "Hello")]


def test_lines_keep_source_order():
    assert parse_synced_lyrics("[00:00]A\n[01:05]B") == [Lyric(0, "A"), Lyric(65, "B")]


def test_plain_line_gets_time_zero():
    assert parse_synced_lyrics("plain line, no brackets") == [
        Lyric(0, "plain line, no brackets")
    ]


def test_empty_input_gives_one_empty_line():
    assert parse_synced_lyrics("") == [Lyric(0, "")]


def test_fractional_seconds_and_whitespace():
    lyrics = parse_synced_lyrics("[00:12.50]   First line  \r\n[ 1 : 02.25 ]Second")
    assert lyrics[0] == Lyric(12.5, "First line")
    assert lyrics[1] == Lyric(62.25, "Second")


def test_out_of_order_timestamps_are_not_sorted():
    lyrics = parse_synced_lyrics("[00:20]late\n[00:10]early")
    assert [lyric.text for lyric in lyrics] == ["late", "early"]


def test_tag_is_found_after_leading_text():
    assert parse_synced_lyrics("intro [00:05] words") == [Lyric(5, "words")]


def test_only_first_tag_is_read():
    assert parse_synced_lyrics("[00:01][00:02]chorus") == [Lyric(1, "[00:02]chorus")]


def test_metadata_tag_gives_nan_time():
    (lyric,) = parse_synced_lyrics("[ar:Some Artist]")
    assert math.isnan(lyric.time)
    assert lyric.text == ""


def test_tag_without_seconds_gives_nan():
    (lyric,) = parse_synced_lyrics("[42]text")
    assert math.isnan(lyric.time)
    assert lyric.text == "text"


def test_strict_mode_rejects_malformed_tag():
    with pytest.raises(LyricsParseError) as exc:
        parse_synced_lyrics("[00:01]ok\n[ar:Artist]", strict=True)
    assert exc.value.line_number == 2


def test_strict_mode_accepts_well_formed_text():
    assert parse_synced_lyrics("[00:01]a\nplain", strict=True) == [Lyric(1, "a"), Lyric(0, "plain")]


def test_plain_text_joins_lines():
    lyrics = parse_synced_lyrics("[00:01]one\n[00:02]two")
    assert plain_text(lyrics) == "one\ntwo"


def test_line_at_positions():
    lyrics = parse_synced_lyrics("[00:05]a\n[00:10]b\n[00:20]c")
    assert line_at(lyrics, 0) == EMPTY_LINE
    assert line_at(lyrics, 5) == Lyric(5, "a")
    assert line_at(lyrics, 12.3) == Lyric(10, "b")
    assert line_at(lyrics, 999) == Lyric(20, "c")
    assert line_at([], 3) == EMPTY_LINE


def test_line_at_skips_nan_lines():
    lyrics = parse_synced_lyrics("[ti:Title]\n[00:01]first")
    assert line_at(lyrics, 0.5) == EMPTY_LINE
    assert line_at(lyrics, 2) == Lyric(1, "first")


def test_text_stops_at_carriage_return_and_unicode_separators():
    lyrics = parse_synced_lyrics("[00:01]kept\rdropped\n[00:02]also\u2028gone")
    assert lyrics == [Lyric(1.0, "kept"), Lyric(2.0, "also")]


def test_radix_and_infinity_components():
    assert parse_synced_lyrics("[0x1:0b11]a")[0].time == 63.0
    assert parse_synced_lyrics("[00:Infinity]b")[0].time == math.inf
    assert math.isnan(parse_synced_lyrics("[-0x1:00]c")[0].time)
    assert math.isnan(parse_synced_lyrics("[0b12:00]d")[0].time)
