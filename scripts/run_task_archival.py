"""Run task archival: move tasks not updated for archive_after_days into archived_task.

Usage:
    python -m scripts.run_task_archival [days]
If days is omitted, ARCHIVE_AFTER_DAYS from config is used (default 365).
Intended for a cron job; exits non-zero when the run was rolled back.
"""

import asyncio
import sys
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

from tasktrail.core.config import get_settings
from tasktrail.core.lifespan import create_lifespan
from tasktrail.domain.exceptions import TaskTrailException
from tasktrail.shared.logging import setup_logging
from tasktrail.shared.utils.datetime import utc_now


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


async def main(days: int) -> int:
    """Archive stale tasks; return the process exit code."""
    cutoff = utc_now() - timedelta(days=days)
    async with create_lifespan() as services:
        try:
            result = await services.archival.run(cutoff)
        except TaskTrailException as e:
            print(f"Archival failed ({e.error_code}): {e.message}", file=sys.stderr)
            return 1
    print(f"Archived {result.archived_count} task(s) not updated since {cutoff.isoformat()}")
    return 0


if __name__ == "__main__":
    load_dotenv(_project_root() / ".env", override=True)
    setup_logging()
    days_arg = sys.argv[1] if len(sys.argv) > 1 else None
    if days_arg is not None:
        if not days_arg.isdigit() or int(days_arg) < 1:
            print("days must be a positive integer", file=sys.stderr)
            sys.exit(2)
        retention_days = int(days_arg)
    else:
        retention_days = get_settings().archive_after_days
    sys.exit(asyncio.run(main(retention_days)))
