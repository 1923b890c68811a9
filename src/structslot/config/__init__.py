"""Ambient configuration: settings and logging."""
