"""Acorn - release catalog and update server core for desktop auto-updaters."""

__version__ = "0.1.0"
