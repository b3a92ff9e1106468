"""Row id generation (CUID2) for client-assigned table ids."""

from cuid2 import cuid_wrapper

cuid_generator = cuid_wrapper()


def generate_row_id() -> str:
    """Return a new CUID2 string, safe to use as a database path segment."""
    return cuid_generator()
