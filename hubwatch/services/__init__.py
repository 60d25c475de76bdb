"""Poller stages and read-side services."""
