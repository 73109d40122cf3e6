"""Utility modules for prbridge."""
