from .user import AdminUserCreate, UserAccessUpdate, UserCreate, UserResponse, UserUpdate
from .token import Token
from .document import (
    DocumentCreate,
    DocumentLanguagesResponse,
    DocumentPublish,
    DocumentUpdate,
    TranslationQueuedResponse,
    TranslationRunResponse,
)

# Define the public API of this module
__all__ = [
    "AdminUserCreate",
    "UserAccessUpdate",
    "UserCreate",
    "UserResponse",
    "UserUpdate",
    "Token",
    "DocumentCreate",
    "DocumentLanguagesResponse",
    "DocumentPublish",
    "DocumentUpdate",
    "TranslationQueuedResponse",
    "TranslationRunResponse",
]
