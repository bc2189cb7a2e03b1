"""Core rewriting engine for refit."""
