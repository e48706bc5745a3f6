"""Shared statistics and I/O helpers."""
