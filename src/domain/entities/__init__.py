"""
Domain Entities

All domain entities organized by model.
Each entity in its own file for better maintainability.
"""

from .enums import AssignmentStatus, UserRole
from .user import User
from .session import Session
from .assignment import Assignment

__all__ = [
    # Enums
    "UserRole",
    "AssignmentStatus",
    # Entities
    "User",
    "Session",
    "Assignment",
]
