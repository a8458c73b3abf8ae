"""Route modules for the Sharebox API."""
from . import admin, auth, files

__all__ = ["auth", "files", "admin"]
