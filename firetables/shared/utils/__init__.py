"""Shared utilities: id generators."""

from firetables.shared.utils.generators import generate_row_id

__all__ = ["generate_row_id"]
