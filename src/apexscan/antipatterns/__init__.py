"""
Apex Antipattern Detection

Detects performance antipatterns in a single Apex class or trigger and
grades them statically or from production telemetry.

Detections:
- Schema.getGlobalDescribe() calls (GGD)
- SOQL without WHERE or LIMIT
- SOQL projecting fields that are never read

Architecture:
1. Detector -> raw detections with static severity
2. Runtime enricher -> severity from telemetry when a record matches
3. Recommender -> fix instruction and, where safe, rewritten code

Usage:
    from apexscan.antipatterns.factory import build_default_registry

    registry = build_default_registry()
    result = registry.scan_all("AccountService", source)
"""
