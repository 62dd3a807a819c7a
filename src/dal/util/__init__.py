"""DAL utilities."""
