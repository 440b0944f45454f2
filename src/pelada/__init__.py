"""Roster, team draft and match statistics for an amateur football club."""

__version__ = "0.1.0"
