"""Text identifiers for stored records."""

from ulid import ULID


def generate_id() -> str:
    """Lexicographically sortable ULID string."""
    return str(ULID())
