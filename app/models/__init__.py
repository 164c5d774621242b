from .document import Document, DocumentLocaleVersion, DocumentStatus
from .user import User

__all__ = [
    "Document",
    "DocumentLocaleVersion",
    "DocumentStatus",
    "User",
]
