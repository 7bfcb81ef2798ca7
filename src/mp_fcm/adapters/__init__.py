"""Adapters – concrete I/O implementations behind the messaging ports."""
