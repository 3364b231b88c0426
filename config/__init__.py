"""Project configuration (see config/settings.py)."""
