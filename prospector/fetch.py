"""
Google Places API client.

Implements the place-lookup operations the resolver and cohort builder use:
- find_place: Find Place from Text (primary, precise)
- search_by_text: Text Search (secondary, broader; also the "10-pack" source)
- get_details: Place Details for a place_id
- search_nearby: Nearby Search around coordinates

Handles:
- Rate limiting and delays
- Exponential backoff on OVER_QUERY_LIMIT, timeouts and transport errors
- Request counting and logging

Failures that survive the retries raise PlaceLookupError so callers can tell
a provider outage from an empty result.
"""

import time
import logging
from typing import Dict, List, Optional

import requests

from .config import get_settings
from .errors import PlaceLookupError
from .models import CandidateRecord

logger = logging.getLogger(__name__)

# API Configuration
BASE_URL = "https://maps.googleapis.com/maps/api/place"
FIND_PLACE_URL = f"{BASE_URL}/findplacefromtext/json"
TEXT_SEARCH_URL = f"{BASE_URL}/textsearch/json"
DETAILS_URL = f"{BASE_URL}/details/json"
NEARBY_URL = f"{BASE_URL}/nearbysearch/json"

CANDIDATE_FIELDS = [
    "place_id",
    "name",
    "formatted_address",
    "rating",
    "user_ratings_total",
    "geometry",
    "types",
]

REQUEST_DELAY = 0.1      # Base delay between requests to respect rate limits
MAX_RETRIES = 3          # Maximum retry attempts on failure
BACKOFF_FACTOR = 2       # Exponential backoff multiplier
MAX_NEARBY_RADIUS_M = 50000

# Statuses that carry a usable (possibly empty) payload
_OK_STATUSES = {"OK", "ZERO_RESULTS", "NOT_FOUND"}


class PlacesClient:
    """
    Google Places API client with retries.

    Attributes:
        api_key: Google Places API key
        request_count: Total API requests made
        total_results: Total places returned
    """

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[int] = None):
        """
        Args:
            api_key: Google Places API key. If None, read from settings
                     (GOOGLE_PLACES_API_KEY).
            timeout: Per-request timeout in seconds.

        Raises:
            ValueError: If no API key is provided or configured.
        """
        settings = get_settings()
        self.api_key = api_key or settings.google_places_api_key
        if not self.api_key:
            raise ValueError(
                "No API key provided. Set GOOGLE_PLACES_API_KEY environment "
                "variable or pass api_key parameter."
            )
        self.timeout = timeout or settings.request_timeout
        self.request_count = 0
        self.total_results = 0
        self.session = requests.Session()

    def _make_request(self, url: str, params: Dict, retry_count: int = 0) -> Dict:
        """
        Make a single API request with retry logic.

        Returns:
            JSON payload for OK / ZERO_RESULTS / NOT_FOUND

        Raises:
            PlaceLookupError: denied, invalid, or retries exhausted
        """
        request_params = dict(params, key=self.api_key)
        try:
            time.sleep(REQUEST_DELAY)
            response = self.session.get(url, params=request_params, timeout=self.timeout)
            self.request_count += 1
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.Timeout:
            return self._retry(url, params, retry_count, "Request timeout", BACKOFF_FACTOR ** retry_count)
        except requests.exceptions.RequestException as e:
            return self._retry(url, params, retry_count, f"Request error: {e}", BACKOFF_FACTOR ** retry_count)

        status = data.get("status")
        if status in _OK_STATUSES:
            return data
        if status == "OVER_QUERY_LIMIT":
            return self._retry(url, params, retry_count, "Rate limited", BACKOFF_FACTOR ** retry_count * 5)
        if status in ("REQUEST_DENIED", "INVALID_REQUEST"):
            message = data.get("error_message", "Unknown error")
            logger.error(f"{status}: {message}")
            raise PlaceLookupError(f"{status}: {message}")

        logger.warning(f"Unexpected status: {status}")
        raise PlaceLookupError(f"Unexpected status: {status}")

    def _retry(self, url: str, params: Dict, retry_count: int, problem: str, wait_time: float) -> Dict:
        if retry_count >= MAX_RETRIES:
            logger.error(f"Max retries exceeded. Last error: {problem}")
            raise PlaceLookupError(problem)
        logger.warning(f"{problem}. Retrying in {wait_time}s ({retry_count + 1}/{MAX_RETRIES})")
        time.sleep(wait_time)
        return self._make_request(url, params, retry_count + 1)

    def _to_records(self, places: List[Dict]) -> List[CandidateRecord]:
        self.total_results += len(places)
        return [CandidateRecord.from_place(p) for p in places]

    def find_place(self, text: str) -> List[CandidateRecord]:
        """Find Place from Text. Returns candidates in provider order (usually one)."""
        data = self._make_request(FIND_PLACE_URL, {
            "input": text,
            "inputtype": "textquery",
            "fields": ",".join(CANDIDATE_FIELDS),
        })
        return self._to_records(data.get("candidates") or [])

    def search_by_text(self, text: str) -> List[CandidateRecord]:
        """Text Search. Returns the ranked result list (up to 20) in provider order."""
        data = self._make_request(TEXT_SEARCH_URL, {"query": text})
        return self._to_records(data.get("results") or [])

    def get_details(self, place_id: str) -> Optional[CandidateRecord]:
        """Place Details for one place_id; None when the place is unknown."""
        data = self._make_request(DETAILS_URL, {
            "place_id": place_id,
            "fields": ",".join(CANDIDATE_FIELDS),
        })
        result = data.get("result")
        if data.get("status") != "OK" or not result:
            logger.debug(f"No details found for place_id: {place_id}")
            return None
        self.total_results += 1
        return CandidateRecord.from_place(result)

    def search_nearby(
        self,
        lat: float,
        lng: float,
        category_hint: Optional[str] = None,
        radius_m: int = 2000,
    ) -> List[CandidateRecord]:
        """
        Nearby Search around a point (first page only).

        Args:
            lat: Latitude of search center
            lng: Longitude of search center
            category_hint: Google place type (e.g. "plumber"); "establishment" if None
            radius_m: Search radius in meters (API max 50000)
        """
        data = self._make_request(NEARBY_URL, {
            "location": f"{lat},{lng}",
            "radius": min(radius_m, MAX_NEARBY_RADIUS_M),
            "type": category_hint or "establishment",
        })
        return self._to_records(data.get("results") or [])

    def get_stats(self) -> Dict:
        """Return current request statistics."""
        return {
            "total_requests": self.request_count,
            "total_results_fetched": self.total_results,
        }
