"""
Core utilities shared across the InternCoach service and client.

This package hosts:
- configuration helpers (env vars, paths, feature flags)
- logging setup
- small date/time helpers used by both the store and the statistics code
"""
