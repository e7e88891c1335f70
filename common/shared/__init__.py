"""Configuration loading and CLI-facing helpers."""
