"""Subversion working-copy integration for editor source-control panels."""

__version__ = "0.1.0"
