"""Timestamp and identifier helpers shared by the authoring and taking workflows."""

from __future__ import annotations

from datetime import datetime, timezone
import random
import string
import time

_ID_ALPHABET = string.ascii_lowercase + string.digits


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def utc_timestamp(moment: datetime | None = None) -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def generate_id(prefix: str, rng: random.Random | None = None) -> str:
    """Return ``<prefix>_<millis>_<9 random base36 chars>``-style identifiers.

    The separator follows the prefix: ``quiz-`` and ``q-`` ids use dashes,
    ``attempt_`` ids use underscores.
    """
    rng = rng or random
    separator = prefix[-1] if prefix and prefix[-1] in "-_" else "_"
    suffix = "".join(rng.choices(_ID_ALPHABET, k=9))
    return f"{prefix}{epoch_millis()}{separator}{suffix}"
