"""Unit tests (no network)."""
