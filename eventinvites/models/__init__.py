from .base import BaseModel
from .user import User

__all__ = [
    "BaseModel",
    "User",
]
