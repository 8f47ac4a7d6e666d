"""Pydantic models for the keep-alive engine.

Field names are the stored JSON keys, so the ``logs`` blob round-trips through
these models unchanged.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter, field_validator

_INT_PREFIX = re.compile(r"^\s*([+-]?[0-9]+)")


def parse_int(value: Any) -> int | None:
    """Lenient integer parse: ints as-is, floats truncated, leading digits of strings."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str):
        m = _INT_PREFIX.match(value)
        return int(m.group(1)) if m else None
    return None


class TriggerKind(str, Enum):
    MANUAL = "MANUAL"
    CRON = "CRON"


class RetryPolicy(BaseModel):
    """Retry count and inter-attempt delay. Invalid input is coerced, never rejected."""

    model_config = ConfigDict(frozen=True)

    maxRetries: int = Field(default=0, validation_alias=AliasChoices("maxRetries", "retryCount"))
    delaySeconds: int = Field(default=1, validation_alias=AliasChoices("delaySeconds", "retryDelay"))

    @field_validator("maxRetries", mode="before")
    @classmethod
    def _sanitize_retries(cls, v: Any) -> int:
        return max(0, parse_int(v) or 0)

    @field_validator("delaySeconds", mode="before")
    @classmethod
    def _sanitize_delay(cls, v: Any) -> int:
        return max(1, parse_int(v) or 1)


class ProbeResult(BaseModel):
    """Outcome of one target's full retry sequence."""

    model_config = ConfigDict(frozen=True)

    url: str
    status: int | None = None
    ok: bool
    elapsedMs: int | None = Field(default=None, validation_alias=AliasChoices("elapsedMs", "time"))  # success only
    attempts: int = Field(default=1, ge=1)
    error: str | None = None  # failure only


class LogEntry(BaseModel):
    """Aggregated record of one execution."""

    model_config = ConfigDict(frozen=True)

    id: int
    timestamp: str
    trigger: TriggerKind = TriggerKind.MANUAL
    results: list[ProbeResult]


RetryPolicyAdapter = TypeAdapter(RetryPolicy)
TargetList = TypeAdapter(list[str])
LogHistory = TypeAdapter(list[LogEntry])
