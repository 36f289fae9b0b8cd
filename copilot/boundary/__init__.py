"""Adapters to external systems: database and completion provider."""
