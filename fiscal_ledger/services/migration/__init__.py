"""Data migration services."""
