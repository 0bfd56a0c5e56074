"""Open release pull requests across a fleet of repositories."""

__version__ = "0.3.0"
