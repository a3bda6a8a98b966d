"""HTTP clients for live distance/time providers."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Protocol

import httpx

from ...config import Settings, settings
from ...errors import ProviderUnavailable
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)

# Transient statuses; other 4xx responses fail immediately.
RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
AUTH_STATUS_CODES = {401, 403}


@dataclass(slots=True, frozen=True)
class ProviderRoute:
    distance_km: float
    duration_minutes: float
    provider: str


@dataclass(slots=True, frozen=True)
class ProviderFailure:
    kind: str
    message: str


class DistanceProvider(Protocol):
    name: str

    def calculate_distance_and_time(
        self, lat1: float, lon1: float, lat2: float, lon2: float
    ) -> ProviderRoute: ...


class HttpRouteProvider:
    """Shared retry/backoff handling for HTTP routing providers."""

    name = "http"

    def __init__(
        self,
        base_url: str,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not base_url:
            raise ValueError(f"{self.name} base URL is not configured.")
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.provider_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.provider_max_retries
        self.backoff_seconds = backoff_seconds if backoff_seconds is not None else settings.provider_backoff_seconds
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        # One client per call; provider instances are shared across batch threads.
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self._transport,
        )

    def _get_json(self, url: str, params: dict | None = None) -> dict:
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params)
                    response.raise_for_status()
                    data = response.json()
                    if not isinstance(data, dict):
                        raise ProviderUnavailable("malformed", f"{self.name} returned a non-object payload.")
                    return data
                except ProviderUnavailable:
                    raise
                except httpx.HTTPStatusError as e:
                    code = e.response.status_code
                    if code in AUTH_STATUS_CODES:
                        raise ProviderUnavailable(
                            "auth", f"{self.name} rejected the credentials (HTTP {code})."
                        ) from e
                    kind = "rate_limit" if code == 429 else "network"
                    attempt += 1
                    if code not in RETRYABLE_STATUS_CODES or attempt > self.max_retries:
                        raise ProviderUnavailable(kind, f"{self.name} request failed with HTTP {code}.") from e
                    time.sleep(self.backoff_seconds * attempt)
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"{self.name} request timed out after {attempt} attempts: {e}")
                        raise ProviderUnavailable("timeout", f"{self.name} request timed out.") from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"{self.name} timeout, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})")
                    time.sleep(wait_time)
                except (httpx.TransportError, OSError) as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        raise ProviderUnavailable(
                            "network", f"Failed to connect to {self.name} at {self.base_url}: {e}"
                        ) from e
                    wait_time = self.backoff_seconds * (2 ** (attempt - 1))
                    logger.debug(f"{self.name} network error, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries}): {e}")
                    time.sleep(wait_time)
                except ValueError as e:
                    raise ProviderUnavailable("malformed", f"{self.name} returned invalid JSON: {e}") from e
        finally:
            client.close()


class OpenRouteServiceClient(HttpRouteProvider):
    name = "openrouteservice"

    def __init__(self, api_key: str | None, profile: str = "driving-car", **kwargs) -> None:
        super().__init__(**kwargs)
        if not api_key:
            raise ValueError("OpenRouteService API key is not configured.")
        self.api_key = api_key
        self.profile = profile

    def calculate_distance_and_time(
        self, lat1: float, lon1: float, lat2: float, lon2: float
    ) -> ProviderRoute:
        params = {
            "api_key": self.api_key,
            "start": f"{lon1},{lat1}",
            "end": f"{lon2},{lat2}",
        }
        data = self._get_json(f"{self.base_url}/v2/directions/{self.profile}", params=params)
        try:
            segment = data["features"][0]["properties"]["segments"][0]
            distance_m = float(segment["distance"])
            duration_s = float(segment["duration"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderUnavailable("malformed", "No route found between coordinates.") from e
        return ProviderRoute(
            distance_km=distance_m / 1000,
            duration_minutes=duration_s / 60,
            provider=self.name,
        )


class OSRMRouteClient(HttpRouteProvider):
    name = "osrm"

    def __init__(self, profile: str = "driving", **kwargs) -> None:
        super().__init__(**kwargs)
        self.profile = profile

    def calculate_distance_and_time(
        self, lat1: float, lon1: float, lat2: float, lon2: float
    ) -> ProviderRoute:
        # OSRM route endpoint expects coordinates as "lon,lat;lon,lat"
        coordinate_str = f"{lon1},{lat1};{lon2},{lat2}"
        url = f"{self.base_url}/route/v1/{self.profile}/{coordinate_str}"
        data = self._get_json(url, params={"overview": "false", "steps": "false"})
        if data.get("code") != "Ok":
            error_msg = data.get("message", "Unknown OSRM route error")
            raise ProviderUnavailable("malformed", f"OSRM route request failed: {error_msg}")
        try:
            route = data["routes"][0]
            distance_m = float(route["distance"])
            duration_s = float(route["duration"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderUnavailable("malformed", "OSRM response missing distance/duration.") from e
        return ProviderRoute(
            distance_km=distance_m / 1000,
            duration_minutes=duration_s / 60,
            provider=self.name,
        )


def build_provider(config: Settings | None = None) -> DistanceProvider | None:
    """Create the configured provider, or None when it cannot be used."""
    config = config or settings
    common = {
        "timeout": config.provider_timeout_seconds,
        "max_retries": config.provider_max_retries,
        "backoff_seconds": config.provider_backoff_seconds,
    }
    try:
        match config.map_provider:
            case "openrouteservice":
                return OpenRouteServiceClient(
                    api_key=config.ors_api_key,
                    profile=config.ors_profile,
                    base_url=config.ors_base_url,
                    **common,
                )
            case "osrm":
                return OSRMRouteClient(
                    profile=config.osrm_profile,
                    base_url=config.osrm_base_url or "",
                    **common,
                )
            case _:
                raise ValueError(f"Unknown map provider '{config.map_provider}'.")
    except ValueError as e:
        logger.warning(f"Map provider unavailable, all requests will use the fallback: {e}")
        return None


def fetch_distance_and_time(
    provider: DistanceProvider | None,
    pickup: Coordinate,
    delivery: Coordinate,
) -> ProviderRoute | ProviderFailure:
    """Query the provider and return either its route or a failure value."""
    if provider is None:
        return ProviderFailure(kind="unconfigured", message="Map provider is not configured.")
    try:
        return provider.calculate_distance_and_time(
            pickup.latitude, pickup.longitude, delivery.latitude, delivery.longitude
        )
    except ProviderUnavailable as e:
        logger.warning(f"{provider.name} unavailable ({e.kind}): {e}")
        return ProviderFailure(kind=e.kind, message=str(e))
    except Exception as e:
        logger.exception(f"Unexpected {provider.name} error: {e}")
        return ProviderFailure(kind="network", message=str(e))


def check_health(provider: DistanceProvider | None) -> bool:
    """Probe the provider with a short route (Berlin area)."""
    if provider is None:
        return False
    try:
        provider.calculate_distance_and_time(52.517037, 13.388860, 52.496891, 13.385983)
        return True
    except ProviderUnavailable:
        return False
