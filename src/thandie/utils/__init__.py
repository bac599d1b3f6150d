"""Utility modules for Thandie."""
