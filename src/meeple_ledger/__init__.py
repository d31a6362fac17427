"""Meeple Ledger - milestone, value club and h-index stats for a board game collection."""

__version__ = "0.1.0"
