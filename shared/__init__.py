"""Helpers shared across formatbridge tools."""
