"""Shared building blocks for the stdpkgs generator (logging, config, file I/O)."""
