"""Require commands."""
