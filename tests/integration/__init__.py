"""Integration tests against a live Realtime Database."""
