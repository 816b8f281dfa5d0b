"""
Shared infrastructure for the Video Compare Tool.

Logging, settings, error types and result objects used by every layer.
"""
