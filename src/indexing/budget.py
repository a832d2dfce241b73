"""Size budget enforcement for search records.

A record whose serialized payload exceeds the soft ceiling is degraded
by an ordered list of steps, re-measuring after every application and
stopping as soon as it fits:

  1. shrink_text        : clamp ``plaintext`` by a fixed byte step, not
                          below ``min_text_bytes``.
  2. drop_auxiliary     : remove ``excerpt`` and ``feature_image``.
  3. drop_tail_taxonomy : remove the last two tags at a time, then the
                          last two authors, until both are empty.

If the record is still above the *hard* ceiling after these, the text is
force-clamped to whatever room the rest of the record leaves, ignoring
the graceful floor.  If even that cannot bring it under the ceiling the
metadata alone is too large and ``RecordBudgetError`` is raised.

Identifying fields (``objectID``, ``postId``) are never touched.  Every
step is a pure function returning a new frozen record, or ``None`` once
it has nothing left to remove.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, replace
from typing import Callable

from src.indexing.byte_budget import byte_len, clamp_bytes
from src.indexing.errors import RecordBudgetError
from src.indexing.models import BudgetState, EnforcementResult, RecordLimits, SearchRecord

logger = logging.getLogger(__name__)


def serialize_record(record: SearchRecord) -> str:
    # compact separators + raw unicode so the measured size matches what
    # JSON.stringify-based clients send over the wire
    return json.dumps(record.to_payload(), ensure_ascii=False, separators=(",", ":"))


def record_size(record: SearchRecord) -> int:
    return byte_len(serialize_record(record))


# ── Degradation steps ─────────────────────────────────────────


@dataclass(frozen=True)
class DegradationStep:
    name: str
    apply: Callable[[SearchRecord, RecordLimits], SearchRecord | None]


def shrink_text(record: SearchRecord, limits: RecordLimits) -> SearchRecord | None:
    current = byte_len(record.plaintext)
    if current <= limits.min_text_bytes:
        return None
    target = max(limits.min_text_bytes, current - limits.shrink_step_bytes)
    return replace(record, plaintext=clamp_bytes(record.plaintext, target))


def drop_auxiliary(record: SearchRecord, limits: RecordLimits) -> SearchRecord | None:
    if record.excerpt is None and record.feature_image is None:
        return None
    return replace(record, excerpt=None, feature_image=None)


def drop_tail_taxonomy(record: SearchRecord, limits: RecordLimits) -> SearchRecord | None:
    if record.tags:
        return replace(record, tags=record.tags[:-2])
    if record.authors:
        return replace(record, authors=record.authors[:-2])
    return None


DEGRADATION_STEPS: tuple[DegradationStep, ...] = (
    DegradationStep("shrink_text", shrink_text),
    DegradationStep("drop_auxiliary", drop_auxiliary),
    DegradationStep("drop_tail_taxonomy", drop_tail_taxonomy),
)


def _escaped_len(text: str) -> int:
    # bytes *text* adds inside the serialized record, quotes excluded
    return byte_len(json.dumps(text, ensure_ascii=False)) - 2


def _clamp_escaped(text: str, max_bytes: int) -> str:
    """Longest prefix of *text* whose JSON-escaped encoding fits *max_bytes*."""
    if _escaped_len(text) <= max_bytes:
        return text
    if max_bytes <= 0:
        return ""
    lo, hi = 0, min(len(text), max_bytes)
    best = 0
    while lo <= hi:
        mid = (lo + hi) // 2
        if _escaped_len(text[:mid]) <= max_bytes:
            best = mid
            lo = mid + 1
        else:
            hi = mid - 1
    return text[:best]


def force_clamp(record: SearchRecord, limits: RecordLimits) -> SearchRecord:
    """Clamp ``plaintext`` to the room left under the hard ceiling minus its margin.

    The room is measured in serialized bytes, so quotes, backslashes and
    control characters count at their escaped width.
    """
    overhead = record_size(replace(record, plaintext=""))
    room = limits.hard_limit_bytes - limits.hard_margin_bytes - overhead
    if room < limits.absolute_min_text_bytes:
        return replace(
            record, plaintext=clamp_bytes(record.plaintext, limits.absolute_min_text_bytes)
        )
    return replace(record, plaintext=_clamp_escaped(record.plaintext, room))


# ── Public interface ──────────────────────────────────────────


def enforce_budget(
    record: SearchRecord,
    limits: RecordLimits,
    steps: tuple[DegradationStep, ...] = DEGRADATION_STEPS,
) -> EnforcementResult:
    """Return *record* degraded until it fits, with the terminal state reached.

    Raises
    ------
    RecordBudgetError
        The record exceeds ``hard_limit_bytes`` even with its text force-clamped.
    """
    size = record_size(record)
    applied: list[str] = []

    for step in steps:
        while size > limits.soft_limit_bytes:
            degraded = step.apply(record, limits)
            if degraded is None:
                break
            record = degraded
            size = record_size(record)
            if step.name not in applied:
                applied.append(step.name)
        if size <= limits.soft_limit_bytes:
            break

    if applied:
        logger.debug(
            "budget: %s degraded via %s -> %d bytes",
            record.object_id, ", ".join(applied), size,
        )

    if size <= limits.hard_limit_bytes:
        return EnforcementResult(
            record=record,
            state=BudgetState.ACCEPTED,
            size_bytes=size,
            applied_steps=tuple(applied),
        )

    record = force_clamp(record, limits)
    size = record_size(record)
    applied.append("force_clamp")
    if size > limits.hard_limit_bytes:
        raise RecordBudgetError(record.object_id, size, limits.hard_limit_bytes)

    logger.warning(
        "budget: %s force-clamped to %d bytes of text (%d bytes total)",
        record.object_id, byte_len(record.plaintext), size,
    )
    return EnforcementResult(
        record=record,
        state=BudgetState.FORCED,
        size_bytes=size,
        applied_steps=tuple(applied),
    )
