"""Helpers shared by raidctl commands."""
