"""Overlay engine services."""
