"""Agent invocation and usage data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -- Invocation --------------------------------------------------------------


class AgentInvocationResult(_CamelModel):
    """Outcome of one successful agent run.  Never persisted."""

    succeeded: bool = True
    output_text: str
    raw_output: str = ""
    usage_stats: dict | None = None
    debug_log_path: str | None = None


class AuthStatus(_CamelModel):
    authenticated: bool
    message: str | None = None
    error: str | None = None
    details: str | None = None


# -- Usage -------------------------------------------------------------------


class ModelUsage(_CamelModel):
    name: str
    requests: int = 0
    prompt_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    cached_tokens: int = 0


class UsageSummary(_CamelModel):
    total_requests: int = 0
    total_prompt_tokens: int = 0
    total_output_tokens: int = 0
    total_tokens: int = 0
    total_cached_tokens: int = 0
    models: list[ModelUsage] = Field(default_factory=list)


class UsageRecord(_CamelModel):
    """Stats reported by the most recent agent run."""

    stats: dict
    summary: UsageSummary
    recorded_at: datetime


class AggregateUsage(_CamelModel):
    """Field-wise sum of every run since the accumulator was created."""

    stats: dict
    summary: UsageSummary
    sessions: int
    since: datetime
    updated_at: datetime


class UsageReport(_CamelModel):
    latest: UsageRecord | None = None
    aggregate: AggregateUsage | None = None
