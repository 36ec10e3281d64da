"""Shared helpers: logging setup and tracing."""
