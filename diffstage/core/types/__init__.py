"""Shared types for diffstage."""
