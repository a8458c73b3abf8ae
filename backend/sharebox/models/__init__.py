"""SQLAlchemy models exposed for metadata creation and imports."""
from .file import FileItem, FileKind
from .user import Credential, User, UserSession

__all__ = ["User", "Credential", "UserSession", "FileItem", "FileKind"]
