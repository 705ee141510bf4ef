"""Deterministic hashing of the task de-duplication tuple."""

from __future__ import annotations

import hashlib
import json


def task_dedup_key(
    tenant_id: str, owner_id: str, title: str, description: str | None
) -> str:
    """Return the SHA-256 hex digest identifying a (tenant, owner, title, description) tuple.

    Canonical JSON keeps a missing description (null) distinct from an empty
    one and makes the key independent of separators inside the values. The
    digest has a fixed length, so the unique index over it stays small no
    matter how long the description is.
    """
    canonical = json.dumps(
        [tenant_id, owner_id, title, description],
        ensure_ascii=False,
        separators=(",", ":"),
    )
    return hashlib.sha256(canonical.encode()).hexdigest()
