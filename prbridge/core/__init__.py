"""Event classification and notification composition."""
