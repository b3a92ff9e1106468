"""Infrastructure: external services (Realtime Database REST API, google-auth)."""
