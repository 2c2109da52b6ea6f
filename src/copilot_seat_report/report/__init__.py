"""Seat report services: configuration, GitHub access and report rendering."""
