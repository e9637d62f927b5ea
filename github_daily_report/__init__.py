"""Report a GitHub user's activity from yesterday."""

__version__ = "0.1.0"
