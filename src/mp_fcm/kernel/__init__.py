"""Kernel – shared error taxonomy."""
