"""Cancels superseded and failing CI builds on a merge-bot integration branch."""

__version__ = "0.1.0"
