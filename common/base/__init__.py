"""Low-level shared utilities for the stdpkgs generator."""

from .logging import get_logger, setup_logging, GenLogger

__all__ = [
    "get_logger",
    "setup_logging",
    "GenLogger",
]
