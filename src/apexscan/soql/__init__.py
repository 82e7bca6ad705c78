"""Inline SOQL text model."""
