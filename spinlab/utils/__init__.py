"""Shared utilities: logging setup, history buffer."""
