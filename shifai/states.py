"""
Response Cascade Stages.

A chat reply is produced by trying each stage in a fixed order until one
yields non-empty text:

  ATTEMPT_REMOTE ──(failure / empty)──▶ LOCAL_PATTERN_MATCH ──(no intent)──▶ GENERIC_FALLBACK

GENERIC_FALLBACK always produces text, so the cascade always resolves.
Disclaimer attachment runs once afterwards, whichever stage answered.
"""

from enum import Enum


class ResponseStage(Enum):
    """Stages of the chat reply cascade."""

    ATTEMPT_REMOTE = "attempt_remote"
    LOCAL_PATTERN_MATCH = "local_pattern_match"
    GENERIC_FALLBACK = "generic_fallback"


STAGE_ORDER: tuple[ResponseStage, ...] = (
    ResponseStage.ATTEMPT_REMOTE,
    ResponseStage.LOCAL_PATTERN_MATCH,
    ResponseStage.GENERIC_FALLBACK,
)


def next_stage(current: ResponseStage) -> ResponseStage | None:
    """The stage tried after ``current`` fails, or None after the last one."""
    index = STAGE_ORDER.index(current)
    return STAGE_ORDER[index + 1] if index + 1 < len(STAGE_ORDER) else None
