"""Runtime telemetry: models, severity calculation and enrichment."""
