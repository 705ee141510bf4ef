"""Row identifiers: CUID2 strings for tenants, users, tasks and grants."""

from cuid2 import cuid_wrapper

_next_id = cuid_wrapper()


def generate_cuid() -> str:
    """Return a new CUID2 id.

    Ids carry no ordering; listings sort by timestamps, and id order is only
    used to take row locks in a stable sequence.
    """
    return str(_next_id())
