"""
Millisecond timestamps and record id generation (stdlib-only).

Ids have the form ``<prefix>_<epoch-ms>_<5 base36 chars>``, e.g.
``chore_1718036400000_k3f9a``.  The prefix tells the record kind apart in
logs and exports; uniqueness within a document comes from the millisecond
component plus the random suffix.
"""

import random
import time

TENDER_PREFIX = "c"
CHORE_PREFIX = "chore"
HISTORY_PREFIX = "h"

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def now_ms() -> int:
    """Current time as integer milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


def generate_id(prefix: str, timestamp_ms: int | None = None) -> str:
    """Generate a record id for ``prefix`` at ``timestamp_ms`` (default: now)."""
    ts = now_ms() if timestamp_ms is None else timestamp_ms
    suffix = "".join(random.choices(_BASE36, k=5))
    return f"{prefix}_{ts}_{suffix}"
