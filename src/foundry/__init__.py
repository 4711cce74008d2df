"""Foundry: create GitHub repositories and productionalize them."""

__version__ = "1.0.0"
