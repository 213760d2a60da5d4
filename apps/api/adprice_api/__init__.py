"""Auction price crypter API."""

__version__ = "1.0.0"
