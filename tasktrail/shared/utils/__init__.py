"""Shared utility helpers (ids, datetimes, hashing)."""

from tasktrail.shared.utils.datetime import ensure_utc, utc_now
from tasktrail.shared.utils.generators import generate_cuid
from tasktrail.shared.utils.hashing import task_dedup_key

__all__ = ["ensure_utc", "generate_cuid", "task_dedup_key", "utc_now"]
