"""Turning uploaded files into slides."""
