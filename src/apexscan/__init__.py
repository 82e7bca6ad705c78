"""
apexscan - Apex antipattern detection and severity enrichment.

Scans the source of a single Apex class or trigger for performance
antipatterns, grades them statically or from runtime telemetry and
produces fix guidance.
"""

__version__ = "0.1.0"
