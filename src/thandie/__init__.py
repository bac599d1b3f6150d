"""Thandie - inventory of local development workspaces."""

__version__ = "0.1.0"
__author__ = "ThandieOps"
