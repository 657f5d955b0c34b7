"""HTTP API for the governance engine."""
