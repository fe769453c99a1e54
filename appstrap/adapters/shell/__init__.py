"""Shell adapters — subprocess execution and filesystem helpers."""
