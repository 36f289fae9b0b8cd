"""
Cosmic Works Copilot backend.

Retrieval-augmented chat over a product catalog with a semantic
completion cache and partitioned session/message persistence.
"""

__version__ = "0.1.0"
