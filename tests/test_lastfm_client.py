# tests/test_lastfm_client.py
import pytest
import requests

from autoradio.lastfm.client import LastFmClient
from autoradio.player.queue import PlayQueue
from autoradio.radio.engine import select_and_enqueue_next_track
from autoradio.radio.models import Artist, Found, Track
from autoradio.radio.provider import ProviderError
from autoradio.settings import Settings

SIMILAR_PAYLOAD = {
    "similartracks": {
        "track": [
            {"name": "Dayvan Cowboy", "match": "1", "artist": {"name": "Boards of Canada"},
             "image": [{"#text": "https://img/s.png", "size": "small"}]},
            {"name": "Dive", "match": "0.41", "artist": {"name": "Tycho"}, "image": []},
        ],
        "@attr": {"artist": "Boards of Canada"},
    }
}


class StubResponse:
    def __init__(self, status_code=200, payload=None, text_only=False):
        self.status_code = status_code
        self._payload = payload
        self._text_only = text_only

    def json(self):
        if self._text_only:
            raise ValueError("not json")
        return self._payload


class StubSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.requests = []

    def get(self, url, params=None, timeout=None):
        self.requests.append((url, params, timeout))
        if self.exc:
            raise self.exc
        return self.response


def make_client(**kw):
    session = StubSession(**kw)
    return LastFmClient("key123", timeout=4.0, session=session), session


def test_similar_tracks():
    client, session = make_client(response=StubResponse(payload=SIMILAR_PAYLOAD))
    tracks = client.similar_tracks("Boards of Canada", "Roygbiv", 10)

    assert tracks == [
        Track("Boards of Canada", "Dayvan Cowboy", 1.0, "https://img/s.png"),
        Track("Tycho", "Dive", 0.41, ""),
    ]
    url, params, timeout = session.requests[0]
    assert url == LastFmClient.BASE_URL
    assert params["method"] == "track.getsimilar"
    assert params["api_key"] == "key123"
    assert params["format"] == "json"
    assert params["artist"] == "Boards of Canada"
    assert params["track"] == "Roygbiv"
    assert params["limit"] == 10
    assert timeout == 4.0


def test_similar_tracks_without_limit():
    client, session = make_client(response=StubResponse(payload={"similartracks": {"track": []}}))
    assert client.similar_tracks("A", "b", 0) == []
    assert "limit" not in session.requests[0][1]


def test_similar_artists_and_top_tracks():
    client, session = make_client(response=StubResponse(payload={
        "similarartists": {"artist": [{"name": "Bibio", "match": "0.9"}, {"name": "Tycho", "match": "0.5"}]}
    }))
    assert client.similar_artists("Boards of Canada") == [Artist("Bibio", 0.9), Artist("Tycho", 0.5)]
    assert session.requests[0][1]["method"] == "artist.getsimilar"

    # single result collapsed into an object
    client, session = make_client(response=StubResponse(payload={
        "toptracks": {"track": {"name": "Olson", "artist": {"name": "Boards of Canada"}, "playcount": "9"}}
    }))
    assert client.top_tracks("Boards of Canada") == [Track("Boards of Canada", "Olson", 0.0)]
    assert session.requests[0][1]["method"] == "artist.gettoptracks"


def test_missing_section_is_empty():
    client, _ = make_client(response=StubResponse(payload={}))
    assert client.top_tracks("Nobody") == []


def test_unknown_track_is_empty():
    # Last.fm answers error 6 (with HTTP 400 or 200) for things it doesn't know
    client, _ = make_client(response=StubResponse(status_code=400, payload={"error": 6, "message": "Track not found"}))
    assert client.similar_tracks("Someone", "Obscure Bootleg", 10) == []
    assert client.top_tracks("Nobody At All") == []

    client, _ = make_client(response=StubResponse(payload={"error": "6", "message": "The artist you supplied could not be found"}))
    assert client.similar_artists("Nobody At All") == []


def test_api_error_payload():
    client, _ = make_client(response=StubResponse(status_code=403, payload={"error": 10, "message": "Invalid API key"}))
    with pytest.raises(ProviderError, match="Invalid API key"):
        client.similar_tracks("A", "b", 10)

    client, _ = make_client(response=StubResponse(payload={"error": 29, "message": "Rate limit exceeded"}))
    with pytest.raises(ProviderError, match="error 29"):
        client.similar_artists("A")


class RoutingSession:
    """Answers track.getsimilar per seed track name."""

    def __init__(self, by_track):
        self.by_track = by_track

    def get(self, url, params=None, timeout=None):
        return self.by_track[params["track"]]


def test_unknown_seed_does_not_spoil_the_pick():
    found = {"similartracks": {"track": [{"name": "Dayvan Cowboy", "match": "0.8", "artist": {"name": "Boards of Canada"}}]}}
    session = RoutingSession({
        "Obscure Bootleg": StubResponse(status_code=400, payload={"error": 6, "message": "Track not found"}),
        "Roygbiv": StubResponse(payload=found),
    })
    client = LastFmClient("key123", session=session)
    queue = PlayQueue.from_pairs([("Someone", "Obscure Bootleg"), ("Boards of Canada", "Roygbiv")])

    result = select_and_enqueue_next_track(queue, Settings(), queue, client, rng_seed=0)

    assert isinstance(result, Found)
    assert result.track.name == "Dayvan Cowboy"
    assert len(queue) == 3


def test_http_error_and_bad_body():
    client, _ = make_client(response=StubResponse(status_code=503, text_only=True))
    with pytest.raises(ProviderError, match="503"):
        client.similar_artists("A")

    client, _ = make_client(response=StubResponse(status_code=200, text_only=True))
    with pytest.raises(ProviderError, match="non-JSON"):
        client.similar_artists("A")

    client, _ = make_client(response=StubResponse(payload={"toptracks": "nope"}))
    with pytest.raises(ProviderError):
        client.top_tracks("A")


def test_transport_error():
    client, _ = make_client(exc=requests.ConnectionError("connection refused"))
    with pytest.raises(ProviderError, match="connection refused"):
        client.similar_tracks("A", "b", 5)


def test_requires_api_key():
    with pytest.raises(RuntimeError):
        LastFmClient("")
