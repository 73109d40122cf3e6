"""Inbound GitHub webhook boundary."""
