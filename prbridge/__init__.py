"""prbridge - GitHub pull request notifications for Chatwork."""
__version__ = "0.1.0"
