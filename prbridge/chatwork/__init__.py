"""Chatwork API client."""

from .client import ChatworkClient

__all__ = ["ChatworkClient"]
