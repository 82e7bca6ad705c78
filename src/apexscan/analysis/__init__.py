"""Data-flow analysis over Apex source."""
