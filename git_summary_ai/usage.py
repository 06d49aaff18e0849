"""Token Usage - a local ledger of tokens spent per provider and model."""

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

from git_summary_ai.models.types import from_iso, to_iso, utc_now
from git_summary_ai.paths import usage_ledger_path

logger = logging.getLogger(__name__)

LEDGER_VERSION = "1.0"
MAX_RECORDS = 10000


@dataclass
class UsageRecord:
    id: str
    timestamp: datetime
    provider: str
    model: str
    input_tokens: int
    output_tokens: int
    operation: str = "summarize"

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": to_iso(self.timestamp),
            "provider": self.provider,
            "model": self.model,
            "inputTokens": self.input_tokens,
            "outputTokens": self.output_tokens,
            "totalTokens": self.total_tokens,
            "operation": self.operation,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'UsageRecord':
        return cls(
            id=str(data.get("id") or uuid.uuid4()),
            timestamp=from_iso(data["timestamp"]),
            provider=str(data["provider"]),
            model=str(data["model"]),
            input_tokens=int(data.get("inputTokens", 0)),
            output_tokens=int(data.get("outputTokens", 0)),
            operation=str(data.get("operation", "summarize")),
        )


class UsageStorage:
    """JSON file holding {version, records}; the newest MAX_RECORDS are kept."""

    def __init__(self, path: Path | None = None):
        self._path = path

    @property
    def path(self) -> Path:
        return self._path or usage_ledger_path()

    def load_records(self) -> list[UsageRecord]:
        path = self.path
        if not path.is_file():
            return []
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            raw = data["records"]
        except (json.JSONDecodeError, OSError, KeyError, TypeError) as e:
            logger.warning(f"Warning: {path.name} is unreadable, starting fresh ({e})")
            return []

        records = []
        for item in raw if isinstance(raw, list) else []:
            try:
                records.append(UsageRecord.from_dict(item))
            except (KeyError, TypeError, ValueError, AttributeError) as e:
                logger.debug(f"Skipping bad usage record: {e}")
        return records

    def save_records(self, records: list[UsageRecord]) -> None:
        """Write the ledger. Failures are logged, never raised."""
        data = {
            "version": LEDGER_VERSION,
            "records": [r.to_dict() for r in records[-MAX_RECORDS:]],
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)
        except OSError as e:
            logger.warning(f"Failed to save token usage: {e}")

    def append_record(self, record: UsageRecord) -> None:
        records = self.load_records()
        records.append(record)
        self.save_records(records)

    def clear(self) -> None:
        self.save_records([])

    def records_between(self, start: datetime, end: datetime) -> list[UsageRecord]:
        return [r for r in self.load_records() if start <= r.timestamp <= end]


@dataclass
class ProviderUsage:
    tokens: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    requests: int = 0


@dataclass
class ModelUsage:
    tokens: int = 0
    requests: int = 0


@dataclass
class UsageSummary:
    total_tokens: int = 0
    total_input: int = 0
    total_output: int = 0
    request_count: int = 0
    by_provider: dict[str, ProviderUsage] = field(default_factory=dict)
    by_model: dict[str, ModelUsage] = field(default_factory=dict)
    period_start: datetime | None = None
    period_end: datetime | None = None


class TokenTracker:
    def __init__(self, storage: UsageStorage | None = None, clock: Callable[[], datetime] | None = None):
        self.storage = storage or UsageStorage()
        self._clock = clock or utc_now

    def record_usage(
        self,
        provider: str,
        model: str,
        input_tokens: int,
        output_tokens: int,
        operation: str = "summarize",
    ) -> UsageRecord:
        record = UsageRecord(
            id=str(uuid.uuid4()),
            timestamp=self._clock(),
            provider=str(getattr(provider, "value", provider)),
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            operation=operation,
        )
        self.storage.append_record(record)
        return record

    def summarize(self, since: datetime | None = None) -> UsageSummary:
        """Totals for records at or after `since` (all records when None)."""
        now = self._clock()
        if since is not None:
            records = self.storage.records_between(since, now)
        else:
            records = self.storage.load_records()

        summary = UsageSummary(
            request_count=len(records),
            period_start=since or (records[0].timestamp if records else now),
            period_end=now if since is not None else (records[-1].timestamp if records else now),
        )
        for record in records:
            summary.total_tokens += record.total_tokens
            summary.total_input += record.input_tokens
            summary.total_output += record.output_tokens

            by_provider = summary.by_provider.setdefault(record.provider, ProviderUsage())
            by_provider.tokens += record.total_tokens
            by_provider.input_tokens += record.input_tokens
            by_provider.output_tokens += record.output_tokens
            by_provider.requests += 1

            by_model = summary.by_model.setdefault(record.model, ModelUsage())
            by_model.tokens += record.total_tokens
            by_model.requests += 1

        return summary

    def clear_history(self) -> None:
        self.storage.clear()
