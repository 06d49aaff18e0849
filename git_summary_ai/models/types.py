"""Model Resolution Data Types"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum

from git_summary_ai.providers import Provider

CACHE_VERSION = "1.0"
DEFAULT_TTL_MS = 24 * 60 * 60 * 1000  # 24 hours


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def to_iso(moment: datetime) -> str:
    return moment.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_iso(text: str) -> datetime:
    """Parse an ISO-8601 timestamp; a trailing 'Z' is accepted."""
    if not isinstance(text, str):
        raise TypeError(f"Expected an ISO-8601 string, got {type(text).__name__}")
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


@dataclass(frozen=True)
class CachedModel:
    """One model a provider can serve."""
    id: str
    display_name: str
    provider: Provider

    def to_dict(self) -> dict:
        return {"id": self.id, "displayName": self.display_name, "provider": self.provider.value}

    @classmethod
    def from_dict(cls, data: dict) -> "CachedModel":
        return cls(
            id=data["id"],
            display_name=data.get("displayName") or data["id"],
            provider=Provider(data["provider"]),
        )


class FetchStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"
    STALE = "stale"


@dataclass
class ProviderCache:
    """Cached model list for a single provider."""
    models: list[CachedModel]
    last_fetched: datetime
    ttl: int = DEFAULT_TTL_MS  # milliseconds
    fetch_status: FetchStatus = FetchStatus.SUCCESS

    def is_expired(self, now: datetime) -> bool:
        """Fresh only while strictly younger than the TTL."""
        return now - self.last_fetched >= timedelta(milliseconds=self.ttl)

    def to_dict(self) -> dict:
        return {
            "models": [m.to_dict() for m in self.models],
            "lastFetched": to_iso(self.last_fetched),
            "fetchStatus": self.fetch_status.value,
            "ttl": self.ttl,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ProviderCache":
        return cls(
            models=[CachedModel.from_dict(m) for m in data["models"]],
            last_fetched=from_iso(data["lastFetched"]),
            ttl=int(data.get("ttl", DEFAULT_TTL_MS)),
            fetch_status=FetchStatus(data.get("fetchStatus", FetchStatus.SUCCESS.value)),
        )


@dataclass
class ModelsCacheDocument:
    """Everything in models-cache.json. Always written back as a whole."""
    version: str = CACHE_VERSION
    last_updated: datetime = field(default_factory=utc_now)
    providers: dict[Provider, ProviderCache] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "lastUpdated": to_iso(self.last_updated),
            "providers": {p.value: c.to_dict() for p, c in self.providers.items()},
        }


@dataclass
class FetchResult:
    """Outcome of one catalog call. Failures carry an error instead of raising."""
    provider: Provider
    success: bool
    models: list[CachedModel] | None = None
    error: str | None = None


class OutcomeStatus(str, Enum):
    REFRESHED = "refreshed"
    FAILED = "failed"
    NO_KEY = "no_key"


@dataclass
class RefreshOutcome:
    status: OutcomeStatus
    count: int | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.status == OutcomeStatus.REFRESHED


@dataclass
class RefreshResult:
    timestamp: datetime
    results: dict[Provider, RefreshOutcome] = field(default_factory=dict)

    @property
    def succeeded(self) -> list[Provider]:
        return [p for p, r in self.results.items() if r.success]


@dataclass
class CacheStatus:
    """Cache metadata for diagnostics. Never triggers a fetch."""
    is_cached: bool
    is_expired: bool
    last_fetched: datetime | None = None
    age: str | None = None
    source: str = "static"  # "cached" or "static"
