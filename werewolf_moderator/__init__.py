"""Moderator engine for the Werewolf party game."""

__version__ = "1.0.0"
