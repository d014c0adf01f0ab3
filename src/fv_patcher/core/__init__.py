"""Shared building blocks: errors, configuration, hashing."""
