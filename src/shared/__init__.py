"""Shared kernel: configuration, logging, errors, storage and locks."""
