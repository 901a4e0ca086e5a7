"""Configuration, data loading and small shared helpers."""
