"""Seed dev data from scripts/seed-data.json.

Creates tenants, their users (Employee/Manager), tasks and shares, going
through the same services the application uses so history is recorded.
Each run creates new tenants; duplicate usernames or tasks inside the file
are reported and skipped.

Usage:
    python -m scripts.seed_dev_data [path/to/seed-data.json]

Requires: DATABASE_URL pointing at a migrated database (alembic upgrade head).
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

from tasktrail.core.lifespan import create_lifespan
from tasktrail.domain.exceptions import DuplicateTaskException, UserAlreadyExistsException
from tasktrail.shared.logging import setup_logging


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent


def _load_env() -> None:
    """Load .env from project root so get_settings() sees DATABASE_URL when run as script."""
    load_dotenv(_project_root() / ".env", override=True)


async def run(path: Path) -> None:
    if not path.is_file():
        print(f"Seed file not found: {path}", file=sys.stderr)
        sys.exit(1)
    data = json.loads(path.read_text(encoding="utf-8"))

    async with create_lifespan() as services:
        for t in data.get("tenants", []):
            tenant = await services.directory.create_tenant(t["name"])
            print(f"Tenant {tenant.name} -> {tenant.id}")

            user_ids: dict[str, str] = {}
            for u in t.get("users", []):
                try:
                    user = await services.directory.create_user(
                        tenant.id, u["username"], u["role"]
                    )
                except UserAlreadyExistsException:
                    print(f"  User {u['username']} already exists, skip")
                    continue
                user_ids[u["username"]] = user.id
                print(f"  User {u['username']} ({u['role']}) -> {user.id}")

            for task in t.get("tasks", []):
                owner_id = user_ids.get(task["owner"])
                if owner_id is None:
                    print(f"  Skip task {task['title']!r}: unknown owner", file=sys.stderr)
                    continue
                try:
                    task_id = await services.tasks.create_task(
                        tenant.id,
                        owner_id,
                        task["title"],
                        task.get("priority", "Medium"),
                        task.get("description"),
                        task.get("status", "Pending"),
                    )
                except DuplicateTaskException:
                    print(f"  Task {task['title']!r} already exists, skip")
                    continue
                print(f"  Task {task['title']!r} -> {task_id}")
                for username in task.get("shared_with", []):
                    if username in user_ids:
                        await services.tasks.share_task(
                            task_id, user_ids[username], shared_by=owner_id
                        )
                        print(f"    shared with {username}")

    print("Seed completed.")


def main() -> None:
    _load_env()
    setup_logging()
    root = _project_root()
    path_arg = sys.argv[1] if len(sys.argv) > 1 else None
    path = Path(path_arg) if path_arg else root / "scripts" / "seed-data.json"
    if not path.is_absolute():
        path = (root / path).resolve()
    asyncio.run(run(path))


if __name__ == "__main__":
    main()
