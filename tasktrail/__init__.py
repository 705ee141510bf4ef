"""tasktrail: multi-tenant task management core.

Transactional task mutation with an append-only audit trail, role-based
visibility, per-task sharing, archival of stale tasks, and reporting.
"""

__version__ = "1.0.0"
