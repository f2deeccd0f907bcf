"""Shared helpers used by every tool: logging and console output."""
