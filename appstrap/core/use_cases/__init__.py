"""Use cases — entry points called by the CLI."""
