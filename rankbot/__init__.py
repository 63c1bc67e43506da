"""Classics Ranking Bot: Roblox group ranks by account creation year."""

__version__ = "1.0.0"
