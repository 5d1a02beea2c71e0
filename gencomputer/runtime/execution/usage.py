"""Agent usage statistics accumulator.

The agent CLI reports per-run stats in its JSON envelope::

    {"models": {"<name>": {"api": {...}, "tokens": {...}}},
     "tools": {"totalCalls": ..., "byName": {...}, ...},
     "files": {"totalLinesAdded": ..., "totalLinesRemoved": ...}}

``UsageAccumulator`` keeps the latest record and a running field-wise sum.
It is an explicit object owned by the app (``app.state.usage``); creating a
new instance is the reset.  Nothing is persisted.
"""

from __future__ import annotations

import copy
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from gencomputer.runtime.models.agent import (
    AggregateUsage,
    ModelUsage,
    UsageRecord,
    UsageReport,
    UsageSummary,
)

_API_FIELDS = ("totalRequests", "totalErrors", "totalLatencyMs")
_TOKEN_FIELDS = ("prompt", "candidates", "total", "cached", "thoughts", "tool")
_TOOL_TOTAL_FIELDS = ("totalCalls", "totalSuccess", "totalFail", "totalDurationMs")
_TOOL_FIELDS = ("count", "success", "fail", "durationMs")
_DECISION_FIELDS = ("accept", "reject", "modify", "auto_accept")
_FILE_FIELDS = ("totalLinesAdded", "totalLinesRemoved")


def _num(source: Any, key: str) -> int | float:
    value = source.get(key) if isinstance(source, dict) else None
    return value if isinstance(value, int | float) else 0


def _mapping(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _counters(source: Any, fields: tuple[str, ...]) -> dict[str, int | float]:
    return {name: _num(source, name) for name in fields}


def _add_into(target: dict, source: Any, fields: tuple[str, ...]) -> None:
    for name in fields:
        target[name] = _num(target, name) + _num(source, name)


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------


def normalize_model_stats(stats: Any = None) -> dict:
    stats = stats if isinstance(stats, dict) else {}
    return {
        "api": _counters(stats.get("api"), _API_FIELDS),
        "tokens": _counters(stats.get("tokens"), _TOKEN_FIELDS),
    }


def normalize_tool_stats(stats: Any = None) -> dict:
    stats = stats if isinstance(stats, dict) else {}
    return {
        **_counters(stats, _TOOL_FIELDS),
        "decisions": _counters(stats.get("decisions"), _DECISION_FIELDS),
    }


def normalize_stats(stats: Any = None) -> dict:
    """Fill every counter the merge touches, defaulting missing ones to 0."""
    stats = stats if isinstance(stats, dict) else {}
    tools = stats.get("tools") if isinstance(stats.get("tools"), dict) else {}
    return {
        "models": {name: normalize_model_stats(model) for name, model in _mapping(stats.get("models")).items()},
        "tools": {
            **_counters(tools, _TOOL_TOTAL_FIELDS),
            "totalDecisions": _counters(tools.get("totalDecisions"), _DECISION_FIELDS),
            "byName": {name: normalize_tool_stats(tool) for name, tool in _mapping(tools.get("byName")).items()},
        },
        "files": _counters(stats.get("files"), _FILE_FIELDS),
    }


# ---------------------------------------------------------------------------
# Merge
# ---------------------------------------------------------------------------


def merge_stats(target: dict, source: Any) -> dict:
    """Add ``source`` into ``target`` (a normalised stats dict) in place."""
    source = source if isinstance(source, dict) else {}

    for name, model in _mapping(source.get("models")).items():
        existing = normalize_model_stats(target["models"].get(name))
        incoming = normalize_model_stats(model)
        _add_into(existing["api"], incoming["api"], _API_FIELDS)
        _add_into(existing["tokens"], incoming["tokens"], _TOKEN_FIELDS)
        target["models"][name] = existing

    tools = source.get("tools")
    if isinstance(tools, dict):
        _add_into(target["tools"], tools, _TOOL_TOTAL_FIELDS)
        _add_into(target["tools"]["totalDecisions"], tools.get("totalDecisions"), _DECISION_FIELDS)
        for name, tool in _mapping(tools.get("byName")).items():
            existing = normalize_tool_stats(target["tools"]["byName"].get(name))
            incoming = normalize_tool_stats(tool)
            _add_into(existing, incoming, _TOOL_FIELDS)
            _add_into(existing["decisions"], incoming["decisions"], _DECISION_FIELDS)
            target["tools"]["byName"][name] = existing

    _add_into(target["files"], source.get("files"), _FILE_FIELDS)
    return target


def summarize(stats: Any) -> UsageSummary:
    """Totals across models plus one row per model."""
    summary = UsageSummary()
    models = _mapping(stats.get("models")) if isinstance(stats, dict) else {}
    for name, model in models.items():
        if not isinstance(model, dict):
            continue
        api = model.get("api") or {}
        tokens = model.get("tokens") or {}
        prompt = int(_num(tokens, "prompt"))
        output = int(_num(tokens, "candidates"))
        total = int(tokens["total"]) if isinstance(tokens.get("total"), int | float) else prompt + output
        row = ModelUsage(
            name=name,
            requests=int(_num(api, "totalRequests")),
            prompt_tokens=prompt,
            output_tokens=output,
            total_tokens=total,
            cached_tokens=int(_num(tokens, "cached")),
        )
        summary.total_requests += row.requests
        summary.total_prompt_tokens += row.prompt_tokens
        summary.total_output_tokens += row.output_tokens
        summary.total_tokens += row.total_tokens
        summary.total_cached_tokens += row.cached_tokens
        summary.models.append(row)
    return summary


# ---------------------------------------------------------------------------
# Accumulator
# ---------------------------------------------------------------------------


class UsageAccumulator:
    """Process-lifetime usage aggregate.

    Parameters
    ----------
    clock:
        Returns the current time; defaults to ``datetime.now(UTC)``.
        Injected by tests.
    """

    def __init__(self, clock: Callable[[], datetime] | None = None) -> None:
        self._clock = clock or (lambda: datetime.now(tz=UTC))
        self._latest: UsageRecord | None = None
        self._aggregate: AggregateUsage | None = None

    @property
    def sessions(self) -> int:
        return self._aggregate.sessions if self._aggregate else 0

    def record(self, stats: dict | None) -> None:
        """Record one run's stats.  ``None`` / empty stats are ignored."""
        if not stats:
            return

        now = self._clock()
        cloned = copy.deepcopy(stats)
        self._latest = UsageRecord(stats=cloned, summary=summarize(cloned), recorded_at=now)

        if self._aggregate is None:
            merged = merge_stats(normalize_stats(), cloned)
            self._aggregate = AggregateUsage(
                stats=merged,
                summary=summarize(merged),
                sessions=1,
                since=now,
                updated_at=now,
            )
            return

        merged = merge_stats(self._aggregate.stats, cloned)
        self._aggregate = self._aggregate.model_copy(
            update={
                "stats": merged,
                "summary": summarize(merged),
                "sessions": self._aggregate.sessions + 1,
                "updated_at": now,
            }
        )

    def snapshot(self) -> UsageReport:
        """Deep copies of the latest record and the aggregate."""
        return UsageReport(
            latest=self._latest.model_copy(deep=True) if self._latest else None,
            aggregate=self._aggregate.model_copy(deep=True) if self._aggregate else None,
        )
