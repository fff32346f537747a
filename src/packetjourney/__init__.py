"""Quests that follow a web request from the browser to the database."""

__version__ = "0.1.0"
