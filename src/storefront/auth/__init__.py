"""
Credential utilities: password hashing and JWT issuance.
"""

from .jwt_manager import JWTManager, IssuedToken, get_jwt_manager
from .password import PasswordManager, get_password_manager

__all__ = [
    "JWTManager",
    "IssuedToken",
    "get_jwt_manager",
    "PasswordManager",
    "get_password_manager",
]
