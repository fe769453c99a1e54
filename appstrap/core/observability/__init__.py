"""Observability — logging setup shared by every entrypoint."""
