"""Shared utilities for hwready."""
