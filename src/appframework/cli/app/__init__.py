"""App commands."""
