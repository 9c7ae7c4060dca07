"""RubyGems release history fetching and target version resolution."""

import logging
from datetime import datetime, timezone
from urllib.parse import quote

import httpx
from packaging.version import InvalidVersion, Version
from pydantic import TypeAdapter, ValidationError

from .config import DEFAULT_REGISTRY_URL, DEFAULT_STALENESS_DAYS, DEFAULT_TIMEOUT
from .exceptions import (
    RegistryError,
    RegistryHTTPError,
    RegistryResponseError,
    RegistryTimeoutError,
)
from .models import GemDeclaration, ReleaseRecord, Resolution, Resolved, Skipped

logger = logging.getLogger(__name__)

_release_list = TypeAdapter(list[ReleaseRecord])


def _major(version: str) -> int:
    return Version(version).major


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def stable_releases(history: list[ReleaseRecord]) -> list[ReleaseRecord]:
    """Filter out prereleases and unparsable numbers, highest version first."""
    stable = [r for r in history if not r.prerelease and r.version is not None]
    return sorted(stable, key=lambda r: r.version, reverse=True)


def determine_target_version(
    current_version: str | None,
    history: list[ReleaseRecord],
    threshold_days: int = DEFAULT_STALENESS_DAYS,
    now: datetime | None = None,
) -> str | None:
    """Pick the version a declaration should be pinned to.

    An unpinned gem always takes the newest stable release, as does a gem
    already on the newest major line. A pin ahead of every stable
    release is kept as is. A newer major line is only adopted once
    its first stable release is at least `threshold_days` old; until then the
    current version is kept.

    Args:
        current_version: Pinned version, or None if unpinned
        history: Release history, newest first
        threshold_days: Minimum age in days of a new major line
        now: Reference time, defaults to the current UTC time

    Returns:
        Target version string, or None if there is no stable release
    """
    stable = stable_releases(history)
    if not stable:
        return None

    latest = stable[0]
    if not current_version:
        return latest.number

    latest_major = latest.version.major
    try:
        current_major = _major(current_version)
    except InvalidVersion:
        return latest.number

    if current_major == latest_major:
        return latest.number

    # Newest stable major is behind the pin (e.g. yanked releases): never downgrade
    if latest_major < current_major:
        return current_version

    first_of_major = min(
        (r for r in stable if r.version.major == latest_major),
        key=lambda r: _as_utc(r.created_at),
    )
    if now is None:
        now = datetime.now(timezone.utc)
    age_days = (_as_utc(now) - _as_utc(first_of_major.created_at)).days

    if age_days >= threshold_days:
        return latest.number

    # Stay on the current major. The newest release within it is not looked up.
    return current_version


def resolve(
    declaration: GemDeclaration,
    history: list[ReleaseRecord],
    threshold_days: int = DEFAULT_STALENESS_DAYS,
    now: datetime | None = None,
) -> Resolution:
    """Resolve a declaration against its release history."""
    target = determine_target_version(
        declaration.current_version, history, threshold_days=threshold_days, now=now
    )
    if target is None:
        return Skipped("no stable releases")
    return Resolved(target)


class RubyGemsClient:
    """Client for the RubyGems.org versions API."""

    def __init__(
        self,
        registry_url: str = DEFAULT_REGISTRY_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize RubyGems client.

        Args:
            registry_url: Registry base URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.registry_url = registry_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None
        self._cache: dict[str, list[ReleaseRecord]] = {}

    async def __aenter__(self) -> "RubyGemsClient":
        self._client = httpx.AsyncClient(timeout=self.timeout, transport=self._transport)
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def versions_url(self, gem_name: str) -> str:
        return f"{self.registry_url}/api/v1/versions/{quote(gem_name, safe='')}.json"

    async def fetch_history(self, gem_name: str) -> list[ReleaseRecord]:
        """Fetch the release history of a gem.

        Args:
            gem_name: Name of the gem

        Returns:
            Release records in registry order (newest first)

        Raises:
            RegistryError: On any transport, status or payload failure
        """
        if gem_name in self._cache:
            return self._cache[gem_name]

        if self._client is None:
            raise RuntimeError("RubyGemsClient must be used as an async context manager")

        try:
            response = await self._client.get(self.versions_url(gem_name))
        except httpx.TimeoutException:
            logger.debug("  Timeout fetching info for %s", gem_name)
            raise RegistryTimeoutError(gem_name)
        except httpx.HTTPError as e:
            logger.debug("  Error fetching info for %s: %s", gem_name, e)
            raise RegistryError(gem_name, f"network error: {e}")

        if response.status_code != 200:
            logger.debug("  Error fetching info for %s: HTTP %s", gem_name, response.status_code)
            raise RegistryHTTPError(gem_name, response.status_code)

        try:
            history = _release_list.validate_python(response.json())
        except (ValueError, ValidationError) as e:
            logger.debug("  Error parsing info for %s: %s", gem_name, e)
            raise RegistryResponseError(gem_name, "malformed response")

        self._cache[gem_name] = history
        return history
