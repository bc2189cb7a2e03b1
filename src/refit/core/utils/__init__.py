"""Shared utilities for refit core."""
