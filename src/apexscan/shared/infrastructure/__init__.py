"""Shared infrastructure (config, logging)."""
