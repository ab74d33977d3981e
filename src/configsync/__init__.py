"""Backup and restore of a host application's configuration directory."""

__version__ = "0.1.0"
