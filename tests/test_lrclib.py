from lyricsync.core.errors import ErrorKind
from lyricsync.plugins.lrclib import LrclibPlugin

RECORD = {
    "id": 1,
    "trackName": "Get Lucky",
    "artistName": "Daft Punk",
    "syncedLyrics": "[00:01.00]Like the legend of the phoenix",
    "plainLyrics": "Like the legend of the phoenix",
}


def test_fetch_returns_first_synced_lyrics(settings, fake_session, simple_resp):
    session = fake_session(simple_resp([RECORD, {"syncedLyrics": "other"}]))
    plugin = LrclibPlugin(settings=settings, session=session)

    assert plugin.fetch_lyrics("Daft Punk", "Get Lucky") == RECORD["syncedLyrics"]
    call = session.calls[0]
    assert call["url"] == "https://lrclib.net/api/search"
    assert call["params"] == {"artist_name": "Daft Punk", "track_name": "Get Lucky"}
    assert call["timeout"] == 5


def test_fetch_plain_lyrics(settings, fake_session, simple_resp):
    plugin = LrclibPlugin(settings=settings, session=fake_session(simple_resp([RECORD])))
    assert plugin.fetch_plain_lyrics("Daft Punk", "Get Lucky") == RECORD["plainLyrics"]


def test_http_errors_return_none(settings, fake_session, simple_resp):
    for status in (404, 500):
        plugin = LrclibPlugin(settings=settings, session=fake_session(simple_resp(None, status)))
        assert plugin.fetch_lyrics("A", "T") is None

    plugin = LrclibPlugin(settings=settings, session=fake_session(simple_resp(None, 503)))
    outcome = plugin.lookup("A", "T")
    assert outcome.error == ErrorKind.HTTP
    assert outcome.status == 503


def test_empty_results_return_none(settings, fake_session, simple_resp):
    plugin = LrclibPlugin(settings=settings, session=fake_session(simple_resp([])))
    outcome = plugin.lookup("A", "T")
    assert outcome.value is None
    assert outcome.error == ErrorKind.EMPTY


def test_network_error_returns_none(settings, fake_session, connection_error):
    plugin = LrclibPlugin(settings=settings, session=fake_session(connection_error))
    assert plugin.fetch_lyrics("A", "T") is None

    plugin = LrclibPlugin(settings=settings, session=fake_session(connection_error))
    assert plugin.lookup("A", "T").error == ErrorKind.NETWORK


def test_bad_json_returns_none(settings, fake_session, simple_resp):
    plugin = LrclibPlugin(settings=settings, session=fake_session(simple_resp(bad_json=True)))
    outcome = plugin.lookup("A", "T")
    assert not outcome.ok
    assert outcome.error == ErrorKind.MALFORMED


def test_record_without_synced_lyrics(settings, fake_session, simple_resp):
    plugin = LrclibPlugin(
        settings=settings,
        session=fake_session(simple_resp([{"plainLyrics": "words", "syncedLyrics": None}])),
    )
    assert plugin.fetch_lyrics("A", "T") is None


def test_custom_base_url(settings, fake_session, simple_resp):
    settings.lrclib_base_url = "http://localhost:3000/"
    session = fake_session(simple_resp([RECORD]))
    LrclibPlugin(settings=settings, session=session).fetch_lyrics("A", "T")
    assert session.calls[0]["url"] == "http://localhost:3000/api/search"


def test_injected_session_is_not_closed(settings, fake_session):
    session = fake_session()
    with LrclibPlugin(settings=settings, session=session) as plugin:
        assert plugin.authenticate()
    assert session.closed is False
