"""Identifier generation for blocks, rows, versions, and nested records."""

import uuid


def new_id() -> str:
    """Return a new globally unique identifier string."""
    return str(uuid.uuid4())
