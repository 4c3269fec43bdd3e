"""HTTP API for the vault assistant."""
