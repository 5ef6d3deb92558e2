# autoradio/lastfm/client.py
import logging
from typing import Any, Dict, List, Optional

import requests

from autoradio.radio.models import Artist, Track, normalize_artists, normalize_tracks
from autoradio.radio.provider import ProviderError, SimilarityProvider

logger = logging.getLogger(__name__)

# Last.fm "Invalid parameters", sent for tracks / artists it doesn't know
NOT_FOUND_ERROR = "6"


class LastFmClient(SimilarityProvider):
    """
    Wrapper around the Last.fm web API.
    Only the three lookups the autoradio needs, read-only, api key auth.
    No retries: a failed call fails the current pick.
    """

    BASE_URL = "https://ws.audioscrobbler.com/2.0/"

    def __init__(self, api_key: str, timeout: Optional[float] = 10.0, session: Optional[requests.Session] = None):
        if not api_key:
            raise RuntimeError("No Last.fm API key. Set LASTFM_API_KEY.")
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, method: str, params: Dict[str, Any]) -> Dict[str, Any]:
        query = {"method": method, "api_key": self.api_key, "format": "json", **params}
        try:
            r = self.session.get(self.BASE_URL, params=query, timeout=self.timeout)
        except requests.RequestException as e:
            raise ProviderError(f"Last.fm {method} request failed: {e}") from e

        # Last.fm reports errors as {"error": code, "message": ...}, sometimes with a 200
        try:
            data = r.json()
        except ValueError:
            data = None

        if isinstance(data, dict) and "error" in data:
            if str(data.get("error")) == NOT_FOUND_ERROR:
                # unknown track / artist: nothing similar, same as an empty result
                logger.debug("Last.fm %s %s: %s", method, params, data.get("message", ""))
                return {}
            raise ProviderError(f"Last.fm {method} error {data.get('error')}: {data.get('message', '')}")
        if r.status_code >= 400:
            raise ProviderError(f"Last.fm {method} returned HTTP {r.status_code}")
        if not isinstance(data, dict):
            raise ProviderError(f"Last.fm {method} returned a non-JSON body")
        return data

    @staticmethod
    def _list(data: Dict[str, Any], container: str, key: str):
        section = data.get(container)
        if section is None:
            return []
        if not isinstance(section, dict):
            raise ProviderError(f"Unexpected Last.fm payload: '{container}' is not an object")
        return section.get(key) or []

    # Public API -----------------------------------------------------

    def similar_tracks(self, artist_name: str, track_name: str, limit: int = 100) -> List[Track]:
        params = {"artist": artist_name, "track": track_name, "autocorrect": 1}
        if limit and limit > 0:
            params["limit"] = limit
        data = self._get("track.getsimilar", params)
        tracks = normalize_tracks(self._list(data, "similartracks", "track"))
        logger.debug("track.getsimilar %s - %s: %d tracks", artist_name, track_name, len(tracks))
        return tracks

    def similar_artists(self, artist_name: str) -> List[Artist]:
        data = self._get("artist.getsimilar", {"artist": artist_name, "autocorrect": 1})
        return normalize_artists(self._list(data, "similarartists", "artist"))

    def top_tracks(self, artist_name: str) -> List[Track]:
        data = self._get("artist.gettoptracks", {"artist": artist_name, "autocorrect": 1})
        return normalize_tracks(self._list(data, "toptracks", "track"))
