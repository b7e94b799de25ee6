"""
Domain Enums

All enumeration types used across domain entities.
"""

from enum import Enum


class UserRole(str, Enum):
    """Platform role of an account"""

    student = "student"
    lecturer = "lecturer"
    admin = "admin"


class AssignmentStatus(str, Enum):
    """Publication state of an assignment"""

    draft = "draft"
    published = "published"
    closed = "closed"
