"""Application layer: settings, wiring and the HTTP API."""
