"""HTTP API — manual trigger and read-only views."""
