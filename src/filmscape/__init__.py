"""Filmscape - movie catalogue, reviews and watchlists."""

__version__ = "0.1.0"
